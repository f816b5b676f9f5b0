"""
Engine configuration (environment / .env)
"""
import os
import logging
from typing import Optional

from dotenv import load_dotenv

from .services.chain_configs import get_chain_configs

logger = logging.getLogger(__name__)


class EngineConfiguration:
    """Settings read from the process environment.

    Built once by the entry point and passed explicitly to the validation
    service; nothing here is read again at call time.
    """

    def __init__(self, env: Optional[dict] = None, load_env_file: bool = True):
        if env is None:
            if load_env_file:
                load_dotenv()
            env = os.environ

        # ========== environment ==========
        self.ENVIRONMENT: str = env.get("ENVIRONMENT", "production").lower()
        self.DEBUG_MODE: bool = self.ENVIRONMENT == "development"
        self.LOG_LEVEL: str = env.get("LOG_LEVEL", "DEBUG" if self.DEBUG_MODE else "INFO").upper()
        self.HOST: str = env.get("HOST", "127.0.0.1" if self.DEBUG_MODE else "0.0.0.0")
        self.PORT: int = int(env.get("PORT", "8000"))

        # ========== RPC settings ==========
        self.RPC_TIMEOUT: float = float(env.get("RPC_TIMEOUT", "10.0"))
        self.RPC_MAX_RETRIES: int = int(env.get("RPC_MAX_RETRIES", "1"))
        self.RPC_RETRY_DELAY: float = float(env.get("RPC_RETRY_DELAY", "0.5"))
        self.TRON_API_KEY: Optional[str] = env.get("TRON_API_KEY") or None

        # ========== token settings ==========
        self.TOKEN_DECIMALS_FALLBACK: int = int(env.get("TOKEN_DECIMALS_FALLBACK", "18"))
        self.TOKEN_DECIMALS_CACHE_TTL: float = float(env.get("TOKEN_DECIMALS_CACHE_TTL", "3600"))

        # ========== per-chain endpoints and deposit addresses ==========
        self.RPC_ENDPOINTS: dict = {}
        self.DEPOSIT_ADDRESSES: dict = {}
        for key, cfg in get_chain_configs().items():
            self.RPC_ENDPOINTS[key] = env.get(cfg["rpc_env"]) or cfg["rpc_default"]
            deposit_address = env.get(cfg["deposit_env"])
            if deposit_address:
                self.DEPOSIT_ADDRESSES[key] = deposit_address.strip()

    def rpc_url_for(self, chain: str) -> str:
        return self.RPC_ENDPOINTS[chain]

    def deposit_address_for(self, chain: str) -> Optional[str]:
        return self.DEPOSIT_ADDRESSES.get(chain)

    def validate(self) -> bool:
        """Configuration sanity checks"""
        for chain, url in self.RPC_ENDPOINTS.items():
            if not url.startswith(("http://", "https://")):
                raise ValueError(f"RPC endpoint for {chain} must be an http(s) URL: {url}")
        if self.RPC_TIMEOUT <= 0:
            raise ValueError("RPC_TIMEOUT must be positive.")
        if self.RPC_MAX_RETRIES < 0:
            raise ValueError("RPC_MAX_RETRIES must not be negative.")

        missing = [chain for chain in self.RPC_ENDPOINTS if chain not in self.DEPOSIT_ADDRESSES]
        if missing:
            logger.warning(f"No deposit address configured for: {', '.join(missing)}. Recipient checks need an explicit address.")
        return True
