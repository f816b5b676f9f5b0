"""
Canonical transfer and validation result types shared by every chain adapter
"""
from decimal import Decimal, localcontext
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ChainId(str, Enum):
    """Supported chains (closed set)"""
    ETHEREUM = "ethereum"
    BSC = "bsc"
    SOLANA = "solana"
    TRON = "tron"


class TransferType(str, Enum):
    NATIVE = "native"
    TOKEN = "token"


class TransferStatus(str, Enum):
    """Finality status"""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    FAILED = "Failed"


class ErrorKind(str, Enum):
    """Tag attached to every failed validation so callers can pick guidance text"""
    UNRECOGNIZED_INPUT = "unrecognized_input"
    UNSUPPORTED_CHAIN = "unsupported_chain"
    NOT_FOUND = "not_found"
    NO_TRANSFER_FOUND = "no_transfer_found"
    UNSUPPORTED_TRANSACTION_TYPE = "unsupported_transaction_type"
    RPC_ERROR = "rpc_error"
    RECIPIENT_MISMATCH = "recipient_mismatch"


class IdentifiedHash(BaseModel):
    """Result of classifying user text"""
    model_config = ConfigDict(frozen=True)

    hash: str
    chain: ChainId


class CanonicalTransfer(BaseModel):
    """Chain-independent view of "asset X moved from A to B"."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    chain: ChainId
    type: TransferType
    from_: str = Field(alias="from")
    to: str
    amount: str = Field(description="Decimal string already scaled by the asset's decimals")
    token_address: Optional[str] = Field(default=None, alias="tokenAddress")
    status: TransferStatus

    @model_validator(mode="after")
    def _check_token_address(self):
        if self.type == TransferType.TOKEN and not self.token_address:
            raise ValueError("token transfers require a token address")
        if self.type == TransferType.NATIVE and self.token_address is not None:
            raise ValueError("native transfers must not carry a token address")
        return self


class ValidationResult(BaseModel):
    """Outcome of one validation call.

    `transfer` stays populated on a recipient mismatch so the caller can show
    what was actually found.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = Field(default=None, alias="errorKind")
    hash: str
    chain: str
    transfer: Optional[CanonicalTransfer] = None

    def to_response(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def format_units(raw_amount, decimals: int) -> str:
    """Scale an integer amount by `decimals` into a plain decimal string"""
    with localcontext() as ctx:
        ctx.prec = 100
        value = Decimal(int(raw_amount)).scaleb(-int(decimals))
        text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"
