"""
Typed failures raised by the chain adapters
"""
from typing import Optional

from .models import ErrorKind


class TransactionValidationError(Exception):
    """Base error for the validation engine"""
    kind: ErrorKind = ErrorKind.RPC_ERROR
    default_message = "Validation error"

    def __init__(self, message: Optional[str] = None, chain: str = "unknown", original_error: Optional[Exception] = None):
        self.message = message or self.default_message
        self.chain = chain
        self.original_error = original_error
        super().__init__(self.message)


class FetchError(TransactionValidationError):
    """Raised by an adapter while fetching or decoding a transaction"""


class TransactionNotFound(FetchError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Transaction not found"


class NoTransferFound(FetchError):
    kind = ErrorKind.NO_TRANSFER_FOUND
    default_message = "No transfer found in transaction"


class UnsupportedTransactionType(FetchError):
    kind = ErrorKind.UNSUPPORTED_TRANSACTION_TYPE
    default_message = "Unsupported transaction type"


class RpcError(FetchError):
    """Network or endpoint failure; the only retryable kind"""
    kind = ErrorKind.RPC_ERROR
    default_message = "RPC endpoint error"


class JsonRpcError(RpcError):
    """The endpoint answered with a JSON-RPC `error` member"""

    def __init__(self, message: Optional[str] = None, chain: str = "unknown", code: Optional[int] = None):
        super().__init__(message, chain=chain)
        self.code = code

    @property
    def is_revert(self) -> bool:
        # geth reports reverts as code 3, most other clients as -32000 with a message
        return self.code == 3 or "revert" in self.message.lower()
