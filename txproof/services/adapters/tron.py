"""
Tron adapter (TronGrid / java-tron HTTP API)
"""
import logging
import re

import base58

from ..errors import RpcError, TransactionNotFound, UnsupportedTransactionType
from ..models import CanonicalTransfer, TransferStatus, TransferType, format_units
from .base import ChainAdapter

logger = logging.getLogger(__name__)

SUN_DECIMALS = 6
TRC20_TRANSFER_SELECTOR = "a9059cbb"
# selector + 32-byte address word + 32-byte amount word, in hex characters
TRC20_TRANSFER_DATA_LENGTH = 8 + 64 + 64
TRON_ADDRESS_PREFIX = "41"
# address word and amount word of transfer(address,uint256)
TRC20_ARGUMENTS = re.compile(r"[0-9a-f]{128}")


def hex_to_base58(address: str) -> str:
    """Convert a hex Tron address (41-prefixed, or bare 20 bytes) to base58check"""
    if address.startswith("T") and len(address) == 34:
        return address
    address = address.lower()
    if address.startswith("0x"):
        address = address[2:]
    if len(address) == 40:
        address = TRON_ADDRESS_PREFIX + address
    return base58.b58encode_check(bytes.fromhex(address)).decode()


def _constant_call_failed(body: dict) -> bool:
    """triggerconstantcontract reports a revert in `result` or in the simulated `transaction.ret`"""
    result = body.get("result") or {}
    if result.get("code") or result.get("result") is False:
        return True
    ret = (body.get("transaction") or {}).get("ret") or []
    return bool(ret) and ret[0].get("ret") == "FAILED"


class TronAdapter(ChainAdapter):
    """Handles TransferContract (TRX) and TriggerSmartContract transfer() calls.

    TRC20 call data is sliced at fixed offsets, so anything other than the
    standard transfer(address,uint256) layout is rejected rather than guessed.
    """

    def __init__(self, chain, rpc_url, client, api_key=None, **kwargs):
        headers = {"TRON-PRO-API-KEY": api_key} if api_key else None
        super().__init__(chain, rpc_url, client, headers=headers, **kwargs)
        self.base_url = rpc_url.rstrip("/")

    async def fetch_and_decode(self, tx_hash: str) -> CanonicalTransfer:
        key = self.chain.value
        tx = await self.post_json(f"{self.base_url}/wallet/gettransactionbyid", {"value": tx_hash})
        if not isinstance(tx, dict) or not tx.get("raw_data"):
            logger.info(f"[{key}] transaction not found: {tx_hash}")
            raise TransactionNotFound(chain=key)

        ret = tx.get("ret") or []
        if not ret:
            status = TransferStatus.PENDING
        elif ret[0].get("contractRet") == "SUCCESS":
            status = TransferStatus.CONFIRMED
        else:
            status = TransferStatus.FAILED

        contracts = tx["raw_data"].get("contract") or []
        if not contracts:
            raise UnsupportedTransactionType(chain=key)
        contract = contracts[0]
        contract_type = contract.get("type")
        value = contract.get("parameter", {}).get("value", {})

        if contract_type == "TransferContract":
            logger.info(f"[{key}] TRX transfer detected: {tx_hash}")
            return CanonicalTransfer(
                chain=self.chain,
                type=TransferType.NATIVE,
                from_=hex_to_base58(value["owner_address"]),
                to=hex_to_base58(value["to_address"]),
                amount=format_units(int(value["amount"]), SUN_DECIMALS),
                token_address=None,
                status=status,
            )

        if contract_type == "TriggerSmartContract":
            data = (value.get("data") or "").lower()
            if data.startswith(TRC20_TRANSFER_SELECTOR) and TRC20_ARGUMENTS.fullmatch(data[8:TRC20_TRANSFER_DATA_LENGTH]):
                token_address = hex_to_base58(value["contract_address"])
                decimals = await self.get_token_decimals(value["contract_address"])
                logger.info(f"[{key}] TRC20 transfer detected: {tx_hash}")
                return CanonicalTransfer(
                    chain=self.chain,
                    type=TransferType.TOKEN,
                    from_=hex_to_base58(value["owner_address"]),
                    to=hex_to_base58(TRON_ADDRESS_PREFIX + data[32:72]),
                    amount=format_units(int(data[72:136], 16), decimals),
                    token_address=token_address,
                    status=status,
                )
            logger.info(f"[{key}] smart contract call is not a TRC20 transfer: {tx_hash}")

        raise UnsupportedTransactionType(chain=key)

    async def get_token_decimals(self, contract_address: str) -> int:
        cache_key = f"{self.chain.value}:{contract_address.lower()}"
        cached = self.decimals_cache.get(cache_key)
        if cached is not None:
            return cached

        body = await self.post_json(
            f"{self.base_url}/wallet/triggerconstantcontract",
            {
                "owner_address": contract_address,
                "contract_address": contract_address,
                "function_selector": "decimals()",
                "parameter": "",
            },
        )
        body = body or {}
        constant_result = body.get("constant_result") or []
        if _constant_call_failed(body):
            logger.info(f"[{self.chain.value}] decimals() reverted on {contract_address}: {body.get('result')}")
            constant_result = []

        if not constant_result or not constant_result[0]:
            logger.warning(
                f"[{self.chain.value}] token {contract_address} does not expose decimals(), "
                f"assuming {self.token_decimals_fallback}"
            )
            decimals = self.token_decimals_fallback
        else:
            try:
                decimals = int(constant_result[0], 16)
            except ValueError as e:
                raise RpcError(f"Malformed decimals() result: {constant_result[0]!r}", chain=self.chain.value, original_error=e) from e

        self.decimals_cache.set(cache_key, decimals)
        return decimals
