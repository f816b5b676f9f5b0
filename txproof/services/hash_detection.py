"""
Transaction hash / explorer URL recognition
"""
import logging
import re
from typing import Optional

from .chain_configs import get_chain_configs
from .models import ChainId, IdentifiedHash

logger = logging.getLogger(__name__)

CHAIN_CONFIGS = get_chain_configs()

# (chain, compiled URL pattern, compiled bare-hash pattern) in priority order
_PATTERNS = [
    (ChainId(key), re.compile(cfg["url_pattern"]), re.compile(cfg["hash_pattern"]))
    for key, cfg in CHAIN_CONFIGS.items()
]


def identify(text: str) -> Optional[IdentifiedHash]:
    """Classify user text as a (hash, chain) pair.

    Chains are tried in table order; for each chain the explorer URL form is
    tried before the bare hash form. Returns None for unrecognized input.
    """
    if not text:
        return None

    text_clean = text.strip()

    for chain, url_pattern, hash_pattern in _PATTERNS:
        url_match = url_pattern.search(text_clean)
        if url_match:
            logger.debug(f"[{chain.value}] hash detected from explorer URL: {url_match.group(1)[:20]}...")
            return IdentifiedHash(hash=url_match.group(1), chain=chain)

        if hash_pattern.fullmatch(text_clean):
            logger.debug(f"[{chain.value}] bare hash detected ({len(text_clean)} chars): {text_clean[:20]}...")
            return IdentifiedHash(hash=text_clean, chain=chain)

    logger.debug(f"hash detection failed. length: {len(text_clean)}, first 100 chars: {text_clean[:100]}")
    return None


def get_transaction_hash_guidance() -> str:
    """Help text describing the accepted hash and URL formats per chain"""
    lines = [
        "A transaction hash is a unique identifier for a blockchain transaction. Here's how to recognise it:",
        "",
    ]
    for idx, cfg in enumerate(CHAIN_CONFIGS.values(), 1):
        lines.append(f"{idx}. {cfg['grammar']}")
    lines += [
        "",
        "You can paste either the bare hash or the full explorer link, for example:",
    ]
    for cfg in CHAIN_CONFIGS.values():
        lines.append(f"- {cfg['explorer']}<hash>")
    lines += [
        "",
        "You can usually find the transaction hash on the page where you made the transaction or in your wallet's transaction history.",
    ]
    return "\n".join(lines)
