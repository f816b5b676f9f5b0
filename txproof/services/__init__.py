# Services package
from .chain_configs import get_chain_configs
from .hash_detection import identify, get_transaction_hash_guidance
from .models import (
    CanonicalTransfer,
    ChainId,
    ErrorKind,
    IdentifiedHash,
    TransferStatus,
    TransferType,
    ValidationResult,
)
from .transaction_service import TransactionValidationService

__all__ = [
    "get_chain_configs",
    "identify",
    "get_transaction_hash_guidance",
    "CanonicalTransfer",
    "ChainId",
    "ErrorKind",
    "IdentifiedHash",
    "TransferStatus",
    "TransferType",
    "ValidationResult",
    "TransactionValidationService",
]
