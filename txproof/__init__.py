"""
txproof - identify a crypto transaction from user text and verify the transfer it carries
"""
__version__ = "1.0.0"

from .services import TransactionValidationService, get_transaction_hash_guidance, identify

__all__ = ["TransactionValidationService", "identify", "get_transaction_hash_guidance"]
