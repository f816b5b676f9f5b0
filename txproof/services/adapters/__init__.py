from .base import ChainAdapter
from .evm import EvmAdapter
from .solana import SolanaAdapter
from .tron import TronAdapter, hex_to_base58

__all__ = [
    "ChainAdapter",
    "EvmAdapter",
    "SolanaAdapter",
    "TronAdapter",
    "hex_to_base58",
]
