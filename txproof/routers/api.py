"""
API routes (identify, validate, guidance, chains)
"""
import logging
import re
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from txproof.services.chain_configs import get_chain_configs
from txproof.services.hash_detection import get_transaction_hash_guidance, identify
from txproof.services.models import ErrorKind

logger = logging.getLogger(__name__)

UNRECOGNIZED_MESSAGE = "Unable to extract a valid transaction hash."
CHAIN_MISMATCH_MESSAGE = "The transaction hash does not match the selected blockchain."


class ValidateRequest(BaseModel):
    text: str
    chain: Optional[str] = None
    recipient: Optional[str] = None


def _unrecognized_response(text: str, error: str = UNRECOGNIZED_MESSAGE) -> JSONResponse:
    return JSONResponse(content={
        "found": False,
        "error": error,
        "errorKind": ErrorKind.UNRECOGNIZED_INPUT.value,
        "input": text[:100],
        "guidance": get_transaction_hash_guidance(),
    })


def register_api_routes(app: FastAPI, service, config):
    """Register API routes on the FastAPI app"""

    def resolve_recipient(chain: str, recipient: Optional[str]) -> Optional[str]:
        if recipient:
            return recipient.strip()
        return config.deposit_address_for(chain)

    @app.get("/api/chains")
    async def get_chains():
        """Supported chains"""
        supported_chains = [
            {
                "id": key,
                "name": cfg["name"],
                "symbol": cfg["symbol"],
                "explorer": cfg["explorer"],
                "grammar": cfg["grammar"],
            }
            for key, cfg in get_chain_configs().items()
        ]
        return JSONResponse(content={"supportedChains": supported_chains})

    @app.get("/api/guidance")
    async def get_guidance():
        return JSONResponse(content={"guidance": get_transaction_hash_guidance()})

    @app.get("/api/identify")
    async def identify_transaction(text: str = Query(..., min_length=1)):
        identified = identify(text)
        if identified is None:
            logger.info(f"unrecognized transaction input: {text[:50]}")
            return _unrecognized_response(text)
        return JSONResponse(content={"found": True, "hash": identified.hash, "chain": identified.chain.value})

    @app.get("/api/tx/{chain}/{tx_hash}")
    async def get_transaction(chain: str, tx_hash: str, recipient: Optional[str] = None):
        """Validate a transaction on an explicit chain"""
        result = await service.validate(tx_hash, chain, resolve_recipient(chain.lower(), recipient))
        return JSONResponse(content=result.to_response())

    @app.post("/api/validate")
    async def validate_transaction(body: ValidateRequest):
        """Identify the hash in free text, then validate it.

        A chain chosen earlier by the user wins over the identified one, since
        bare 0x hashes look the same on every EVM chain. The chosen chain must
        accept the hash's grammar.
        """
        identified = identify(body.text)
        if identified is None:
            return _unrecognized_response(body.text)

        chain = body.chain.strip().lower() if body.chain else identified.chain.value
        if chain != identified.chain.value:
            cfg = get_chain_configs().get(chain)
            if cfg is not None and not re.fullmatch(cfg["hash_pattern"], identified.hash):
                logger.info(f"[{chain}] requested chain rejected for {identified.chain.value} hash: {identified.hash[:20]}...")
                return _unrecognized_response(body.text, error=CHAIN_MISMATCH_MESSAGE)
            logger.info(f"[{chain}] validating against requested chain instead of identified {identified.chain.value}")

        result = await service.validate(identified.hash, chain, resolve_recipient(chain, body.recipient))
        return JSONResponse(content={"found": True, **result.to_response()})
