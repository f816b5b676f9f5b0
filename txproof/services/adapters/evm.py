"""
EVM-family adapter (Ethereum, BNB Smart Chain, ...)
"""
import logging

from ..errors import JsonRpcError, NoTransferFound, RpcError, TransactionNotFound
from ..models import CanonicalTransfer, TransferStatus, TransferType, format_units
from .base import ChainAdapter

logger = logging.getLogger(__name__)

# keccak256("Transfer(address,address,uint256)")
ERC20_TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
# transfer(address,uint256)
ERC20_TRANSFER_SELECTOR = "a9059cbb"
# decimals()
ERC20_DECIMALS_SELECTOR = "0x313ce567"


def _topic_to_address(topic: str) -> str:
    return "0x" + topic[-40:].lower()


def _hex_to_int(value) -> int:
    if value in (None, "", "0x"):
        return 0
    return int(value, 16)


class EvmAdapter(ChainAdapter):
    def __init__(self, chain, rpc_url, client, native_decimals: int = 18, **kwargs):
        super().__init__(chain, rpc_url, client, **kwargs)
        self.native_decimals = native_decimals

    def addresses_equal(self, expected: str, actual: str) -> bool:
        return expected.strip().lower() == actual.strip().lower()

    async def fetch_and_decode(self, tx_hash: str) -> CanonicalTransfer:
        key = self.chain.value
        tx = await self.rpc_fetch_transaction("eth_getTransactionByHash", [tx_hash])
        if not tx:
            logger.info(f"[{key}] transaction not found: {tx_hash}")
            raise TransactionNotFound(chain=key)

        receipt = await self.rpc_call("eth_getTransactionReceipt", [tx_hash])
        if not receipt:
            status = TransferStatus.PENDING
        elif _hex_to_int(receipt.get("status")) == 1:
            status = TransferStatus.CONFIRMED
        else:
            status = TransferStatus.FAILED

        value = _hex_to_int(tx.get("value"))
        if value > 0:
            if not tx.get("to"):
                # contract deployment funded with value
                raise NoTransferFound(chain=key)
            logger.info(f"[{key}] native transfer detected: {tx_hash}")
            return CanonicalTransfer(
                chain=self.chain,
                type=TransferType.NATIVE,
                from_=tx["from"],
                to=tx["to"],
                amount=format_units(value, self.native_decimals),
                token_address=None,
                status=status,
            )

        if receipt:
            return await self._decode_transfer_log(tx_hash, receipt, status)
        return await self._decode_transfer_call(tx_hash, tx, status)

    async def _decode_transfer_log(self, tx_hash, receipt, status) -> CanonicalTransfer:
        # ERC-721 Transfer shares the signature but indexes the token id as a fourth topic
        transfer_log = next(
            (
                log for log in receipt.get("logs") or []
                if len(log.get("topics") or []) == 3
                and log["topics"][0].lower() == ERC20_TRANSFER_TOPIC
            ),
            None,
        )
        if transfer_log is None:
            logger.info(f"[{self.chain.value}] no token transfer log in receipt: {tx_hash}")
            raise NoTransferFound(chain=self.chain.value)

        token_address = transfer_log["address"]
        decimals = await self.get_token_decimals(token_address)
        return CanonicalTransfer(
            chain=self.chain,
            type=TransferType.TOKEN,
            from_=_topic_to_address(transfer_log["topics"][1]),
            to=_topic_to_address(transfer_log["topics"][2]),
            amount=format_units(_hex_to_int(transfer_log.get("data")), decimals),
            token_address=token_address,
            status=status,
        )

    async def _decode_transfer_call(self, tx_hash, tx, status) -> CanonicalTransfer:
        """Pending transactions have no logs yet; read a direct transfer() call instead"""
        data = (tx.get("input") or "").lower()
        if data.startswith("0x"):
            data = data[2:]
        if not data.startswith(ERC20_TRANSFER_SELECTOR) or len(data) < 136 or not tx.get("to"):
            logger.info(f"[{self.chain.value}] pending transaction carries no transfer: {tx_hash}")
            raise NoTransferFound(chain=self.chain.value)

        token_address = tx["to"]
        decimals = await self.get_token_decimals(token_address)
        return CanonicalTransfer(
            chain=self.chain,
            type=TransferType.TOKEN,
            from_=tx["from"],
            to="0x" + data[32:72],
            amount=format_units(int(data[72:136], 16), decimals),
            token_address=token_address,
            status=status,
        )

    async def get_token_decimals(self, token_address: str) -> int:
        cache_key = f"{self.chain.value}:{token_address.lower()}"
        cached = self.decimals_cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            result = await self.rpc_call("eth_call", [{"to": token_address, "data": ERC20_DECIMALS_SELECTOR}, "latest"])
        except JsonRpcError as e:
            if not e.is_revert:
                raise
            logger.info(f"[{self.chain.value}] decimals() reverted on {token_address}: {e.message}")
            result = None

        if result in (None, "", "0x"):
            logger.warning(
                f"[{self.chain.value}] token {token_address} does not expose decimals(), "
                f"assuming {self.token_decimals_fallback}"
            )
            decimals = self.token_decimals_fallback
        else:
            try:
                decimals = int(result, 16)
            except (TypeError, ValueError) as e:
                raise RpcError(f"Malformed decimals() result: {result!r}", chain=self.chain.value, original_error=e) from e

        self.decimals_cache.set(cache_key, decimals)
        return decimals
