"""
Shared adapter contract and HTTP/JSON-RPC plumbing
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from ..cache import TTLCache
from ..errors import JsonRpcError, RpcError, TransactionNotFound
from ..models import CanonicalTransfer, ChainId

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
# JSON-RPC "invalid params"; a node rejects a hash of the wrong size or encoding with it
JSONRPC_INVALID_PARAMS = -32602


class ChainAdapter(ABC):
    """One instance per configured chain.

    Subclasses implement `fetch_and_decode` and raise `FetchError` subclasses
    for every failure; they never return partial transfers.
    """

    def __init__(
        self,
        chain: ChainId,
        rpc_url: str,
        client: httpx.AsyncClient,
        timeout: float = 10.0,
        max_retries: int = 1,
        retry_delay: float = 0.5,
        token_decimals_fallback: int = 18,
        decimals_cache: Optional[TTLCache] = None,
        headers: Optional[dict] = None,
    ):
        self.chain = chain
        self.rpc_url = rpc_url
        self.client = client
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.token_decimals_fallback = token_decimals_fallback
        self.decimals_cache = decimals_cache if decimals_cache is not None else TTLCache()
        self.headers = {"User-Agent": "txproof/1.0", "Content-Type": "application/json"}
        if headers:
            self.headers.update(headers)

    @abstractmethod
    async def fetch_and_decode(self, tx_hash: str) -> CanonicalTransfer:
        """Fetch `tx_hash` and decode it into a canonical transfer"""

    def addresses_equal(self, expected: str, actual: str) -> bool:
        """Base58 address forms compare exactly"""
        return expected.strip() == actual.strip()

    async def post_json(self, url: str, payload: dict) -> Any:
        """POST `payload` and return the decoded JSON body.

        Timeouts, transport errors, HTTP 429 and 5xx are retried up to
        `max_retries` times before surfacing as RpcError.
        """
        key = self.chain.value
        attempts = self.max_retries + 1
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                res = await self.client.post(url, json=payload, headers=self.headers, timeout=self.timeout)
                logger.debug(f"[{key}] response status: {res.status_code} (attempt {attempt}/{attempts})")
                res.raise_for_status()
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                if status_code not in RETRYABLE_STATUS_CODES:
                    raise RpcError(f"HTTP {status_code} from RPC endpoint", chain=key, original_error=e) from e
                last_error = e
                logger.warning(f"[{key}] HTTP error (status code: {status_code}), attempt {attempt}/{attempts}")
            except httpx.TimeoutException as e:
                last_error = e
                logger.warning(f"[{key}] request timed out after {self.timeout}s, attempt {attempt}/{attempts}")
            except httpx.RequestError as e:
                last_error = e
                logger.warning(f"[{key}] request error → {e}, attempt {attempt}/{attempts}")
            else:
                try:
                    return res.json()
                except ValueError as e:
                    logger.warning(f"[{key}] JSON parsing failed → {e}. body: {res.text[:200]}")
                    raise RpcError("Malformed JSON from RPC endpoint", chain=key, original_error=e) from e

            if attempt < attempts:
                await asyncio.sleep(self.retry_delay)

        raise RpcError(f"RPC endpoint unavailable: {last_error}", chain=key, original_error=last_error)

    async def rpc_call(self, method: str, params: list) -> Any:
        """JSON-RPC 2.0 call against `rpc_url`; returns the `result` member"""
        payload = {"jsonrpc": "2.0", "method": method, "params": params, "id": 1}
        body = await self.post_json(self.rpc_url, payload)
        if not isinstance(body, dict):
            raise RpcError(f"Unexpected {method} response", chain=self.chain.value)
        if body.get("error"):
            error = body["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            code = error.get("code") if isinstance(error, dict) else None
            logger.debug(f"[{self.chain.value}] {method} returned JSON-RPC error {code}: {message}")
            raise JsonRpcError(f"{method} failed: {message}", chain=self.chain.value, code=code)
        result = body.get("result")
        if result is None:
            logger.debug(f"[{self.chain.value}] RPC response: result is None for {method}")
        return result

    async def rpc_fetch_transaction(self, method: str, params: list) -> Any:
        """`rpc_call` for a by-hash lookup; a hash the node rejects as malformed cannot exist"""
        try:
            return await self.rpc_call(method, params)
        except JsonRpcError as e:
            if e.code != JSONRPC_INVALID_PARAMS:
                raise
            logger.info(f"[{self.chain.value}] node rejected hash as invalid: {e.message}")
            raise TransactionNotFound(chain=self.chain.value, original_error=e) from e
