import logging
from typing import Dict, Optional, Union

import certifi
import httpx

from .adapters import ChainAdapter, EvmAdapter, SolanaAdapter, TronAdapter
from .cache import TTLCache
from .chain_configs import FAMILY_EVM, FAMILY_SOLANA, FAMILY_TRON, get_chain_configs
from .errors import TransactionValidationError
from .models import ChainId, ErrorKind, ValidationResult

CHAIN_CONFIGS = get_chain_configs()

logger = logging.getLogger(__name__)

RECIPIENT_MISMATCH_MESSAGE = "Transaction recipient does not match expected address"
UNSUPPORTED_CHAIN_MESSAGE = "Unsupported blockchain"


class TransactionValidationService:
    """Dispatches a (hash, chain, expected recipient) triple to its chain adapter.

    Stateless across calls: every validation fetches live chain state, and no
    exception escapes `validate`.
    """

    def __init__(self, adapters: Dict[ChainId, ChainAdapter], client: Optional[httpx.AsyncClient] = None):
        self.adapters = adapters
        self._client = client

    @classmethod
    def from_config(cls, config, client: Optional[httpx.AsyncClient] = None) -> "TransactionValidationService":
        owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(verify=certifi.where(), timeout=config.RPC_TIMEOUT)

        decimals_cache = TTLCache(ttl_seconds=config.TOKEN_DECIMALS_CACHE_TTL)
        common = {
            "timeout": config.RPC_TIMEOUT,
            "max_retries": config.RPC_MAX_RETRIES,
            "retry_delay": config.RPC_RETRY_DELAY,
            "token_decimals_fallback": config.TOKEN_DECIMALS_FALLBACK,
            "decimals_cache": decimals_cache,
        }

        adapters: Dict[ChainId, ChainAdapter] = {}
        for key, cfg in CHAIN_CONFIGS.items():
            chain = ChainId(key)
            rpc_url = config.rpc_url_for(key)
            if cfg["family"] == FAMILY_EVM:
                adapters[chain] = EvmAdapter(chain, rpc_url, client, native_decimals=cfg["native_decimals"], **common)
            elif cfg["family"] == FAMILY_SOLANA:
                adapters[chain] = SolanaAdapter(chain, rpc_url, client, **common)
            elif cfg["family"] == FAMILY_TRON:
                adapters[chain] = TronAdapter(chain, rpc_url, client, api_key=config.TRON_API_KEY, **common)
            logger.debug(f"[{key}] adapter ready: {type(adapters[chain]).__name__} -> {rpc_url}")

        return cls(adapters, client=client if owns_client else None)

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()

    async def validate(
        self,
        tx_hash: str,
        chain: Union[ChainId, str],
        expected_recipient: Optional[str] = None,
    ) -> ValidationResult:
        chain_key = chain.value if isinstance(chain, ChainId) else str(chain).strip().lower()
        try:
            adapter = self.adapters[ChainId(chain_key)]
        except (ValueError, KeyError):
            logger.info(f"[{chain_key}] unsupported blockchain requested")
            return ValidationResult(
                is_valid=False,
                error=UNSUPPORTED_CHAIN_MESSAGE,
                error_kind=ErrorKind.UNSUPPORTED_CHAIN,
                hash=tx_hash,
                chain=chain_key,
            )

        try:
            transfer = await adapter.fetch_and_decode(tx_hash)
        except TransactionValidationError as e:
            if e.kind == ErrorKind.RPC_ERROR:
                logger.warning(f"[{chain_key}] transient validation failure for {tx_hash}: {e.message}")
                error = f"Validation error: {e.message}. Please try again later."
            else:
                error = e.message
            return ValidationResult(is_valid=False, error=error, error_kind=e.kind, hash=tx_hash, chain=chain_key)
        except Exception as e:
            logger.error(f"[{chain_key}] unexpected error while validating {tx_hash} → {e}", exc_info=True)
            return ValidationResult(
                is_valid=False,
                error=f"Validation error: {e}. Please try again later.",
                error_kind=ErrorKind.RPC_ERROR,
                hash=tx_hash,
                chain=chain_key,
            )

        if not expected_recipient:
            return ValidationResult(is_valid=True, hash=tx_hash, chain=chain_key, transfer=transfer)

        is_correct_recipient = adapter.addresses_equal(expected_recipient, transfer.to)
        logger.info(
            f"[{chain_key}] recipient validation: expected={expected_recipient}, "
            f"actual={transfer.to}, isCorrect={is_correct_recipient}"
        )
        return ValidationResult(
            is_valid=is_correct_recipient,
            error=None if is_correct_recipient else RECIPIENT_MISMATCH_MESSAGE,
            error_kind=None if is_correct_recipient else ErrorKind.RECIPIENT_MISMATCH,
            hash=tx_hash,
            chain=chain_key,
            transfer=transfer,
        )
