import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from txproof import __version__
from txproof.config import EngineConfiguration
from txproof.routers.api import register_api_routes
from txproof.routers.utility import register_utility_routes
from txproof.services.transaction_service import TransactionValidationService
from txproof.utils import setup_logging, uvicorn_log_config

# --- Configuration / logging ---
config = EngineConfiguration()
log_level = setup_logging(config.LOG_LEVEL)
config.validate()

logger = logging.getLogger(__name__)
logger.info("="*60)
logger.info(f"logging initialised - level: {config.LOG_LEVEL}")
logger.info("="*60)

# --- FastAPI app ---
app = FastAPI(title="Cross-Chain Payment Proof", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

validation_service = TransactionValidationService.from_config(config)


@app.on_event("startup")
async def startup_event():
    for chain, url in config.RPC_ENDPOINTS.items():
        logger.info(f"[{chain}] RPC endpoint: {url}")


@app.on_event("shutdown")
async def shutdown_event():
    """Close the shared RPC connection pool"""
    logger.info("shutting down...")
    await validation_service.aclose()


# --- Routers ---
register_api_routes(app, validation_service, config)
register_utility_routes(app)


if __name__ == "__main__":
    logger.info(f"starting server (host: {config.HOST}, port: {config.PORT})")
    uvicorn.run(
        "main:app",
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower(),
        log_config=uvicorn_log_config(config.LOG_LEVEL),
        use_colors=False,
        access_log=True,
        reload=config.DEBUG_MODE,
    )
