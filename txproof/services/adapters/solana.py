"""
Solana adapter (jsonParsed getTransaction)
"""
import logging
from typing import Optional

from ..errors import NoTransferFound, TransactionNotFound
from ..models import CanonicalTransfer, TransferStatus, TransferType, format_units
from .base import ChainAdapter

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL_DECIMALS = 9

SYSTEM_PROGRAMS = {"system"}
TOKEN_PROGRAMS = {"spl-token", "spl-token-2022"}
SYSTEM_TRANSFER_TYPES = {"transfer", "transferWithSeed"}
TOKEN_TRANSFER_TYPES = {"transfer", "transferChecked"}


def _account_keys(tx: dict) -> list:
    keys = tx.get("transaction", {}).get("message", {}).get("accountKeys", [])
    return [k.get("pubkey") if isinstance(k, dict) else k for k in keys]


def _token_balances(tx: dict) -> dict:
    """accountIndex -> token balance entry (post balances win over pre balances)"""
    meta = tx.get("meta") or {}
    balances = {}
    for entry in (meta.get("preTokenBalances") or []) + (meta.get("postTokenBalances") or []):
        balances[entry.get("accountIndex")] = entry
    return balances


class SolanaAdapter(ChainAdapter):
    """Decodes the first system or SPL token transfer instruction.

    Token amounts are scaled by the mint's decimals, taken from
    `transferChecked` itself or from the transaction's token balance entries.
    Token accounts are reported as their owning wallet when the owner is known.
    """

    async def fetch_and_decode(self, tx_hash: str) -> CanonicalTransfer:
        key = self.chain.value
        logger.info(f"[{key}] fetching transaction: {tx_hash}")
        tx = await self.rpc_fetch_transaction(
            "getTransaction",
            [tx_hash, {"encoding": "jsonParsed", "maxSupportedTransactionVersion": 0, "commitment": "confirmed"}],
        )
        if not tx:
            logger.info(f"[{key}] transaction not found: {tx_hash}")
            raise TransactionNotFound(chain=key)

        meta = tx.get("meta") or {}
        status = TransferStatus.FAILED if meta.get("err") else TransferStatus.CONFIRMED

        instructions = tx.get("transaction", {}).get("message", {}).get("instructions") or []
        if not instructions:
            logger.info(f"[{key}] no instructions found in transaction: {tx_hash}")
            raise NoTransferFound("No instructions found in transaction", chain=key)

        inner_groups = [group.get("instructions") or [] for group in meta.get("innerInstructions") or []]
        for group in [instructions] + inner_groups:
            for inst in group:
                transfer = self._decode_instruction(inst, tx, status)
                if transfer is not None:
                    logger.info(f"[{key}] {transfer.type.value} transfer detected: {tx_hash}")
                    return transfer

        logger.info(f"[{key}] no transfer found in transaction: {tx_hash}")
        raise NoTransferFound(chain=key)

    def _decode_instruction(self, inst: dict, tx: dict, status: TransferStatus) -> Optional[CanonicalTransfer]:
        parsed = inst.get("parsed")
        if not isinstance(parsed, dict):
            return None
        program = inst.get("program")
        info = parsed.get("info") or {}
        kind = parsed.get("type")

        if program in SYSTEM_PROGRAMS and kind in SYSTEM_TRANSFER_TYPES:
            return CanonicalTransfer(
                chain=self.chain,
                type=TransferType.NATIVE,
                from_=info["source"],
                to=info["destination"],
                amount=format_units(int(info["lamports"]), LAMPORTS_PER_SOL_DECIMALS),
                token_address=None,
                status=status,
            )

        if program in TOKEN_PROGRAMS and kind in TOKEN_TRANSFER_TYPES:
            return self._decode_token_transfer(info, tx, status)

        return None

    def _decode_token_transfer(self, info: dict, tx: dict, status: TransferStatus) -> CanonicalTransfer:
        keys = _account_keys(tx)
        balances = _token_balances(tx)

        def balance_for(account):
            if account in keys:
                return balances.get(keys.index(account))
            return None

        source_balance = balance_for(info.get("source"))
        destination_balance = balance_for(info.get("destination"))

        token_amount = info.get("tokenAmount")
        if token_amount:
            raw_amount = int(token_amount["amount"])
            decimals = token_amount.get("decimals")
        else:
            raw_amount = int(info["amount"])
            decimals = None

        mint = info.get("mint")
        for balance in (destination_balance, source_balance):
            if balance:
                mint = mint or balance.get("mint")
                if decimals is None:
                    decimals = balance.get("uiTokenAmount", {}).get("decimals")

        if not mint or decimals is None:
            logger.info(f"[{self.chain.value}] token transfer without resolvable mint or decimals")
            raise NoTransferFound("Token mint could not be resolved for transfer", chain=self.chain.value)

        sender = (source_balance or {}).get("owner") or info.get("authority") or info.get("multisigAuthority") or info["source"]
        recipient = (destination_balance or {}).get("owner") or info["destination"]

        return CanonicalTransfer(
            chain=self.chain,
            type=TransferType.TOKEN,
            from_=sender,
            to=recipient,
            amount=format_units(raw_amount, int(decimals)),
            token_address=mint,
            status=status,
        )
