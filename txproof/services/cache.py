import logging
import time

logger = logging.getLogger(__name__)


class TTLCache:
    """Adapter-local cache for immutable lookups such as token decimals.

    Only values that never change on chain belong here; transaction state is
    always fetched live.
    """

    def __init__(self, ttl_seconds=3600, max_entries=1024, clock=time.monotonic):
        self._entries = {}
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock

    def get(self, key):
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"[Cache Miss] Key: {key}")
            return None
        value, stored_at = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            logger.debug(f"[Cache Miss] Key: {key} (Expired)")
            del self._entries[key]
            return None
        logger.debug(f"[Cache Hit] Key: {key}")
        return value

    def set(self, key, value):
        now = self._clock()
        self._entries.pop(key, None)
        if len(self._entries) >= self.max_entries:
            self._sweep(now)
        # entries are kept in insertion order, oldest first
        while len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug(f"[Cache Evict] Key: {oldest}")
        self._entries[key] = (value, now)
        logger.debug(f"[Cache Set] Key: {key}")

    def _sweep(self, now):
        expired = [k for k, (_, stored_at) in self._entries.items() if now - stored_at >= self.ttl_seconds]
        for k in expired:
            del self._entries[k]
        if expired:
            logger.debug(f"[Cache Sweep] {len(expired)} expired entries removed")

    def __len__(self):
        return len(self._entries)
