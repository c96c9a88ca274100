import logging
import math
import time

log = logging.getLogger(__name__)


class QueryCache:
    """Results keyed by endpoint path.

    Entries never go stale on their own (stale_time is infinite by default);
    they leave only through `invalidate`. Nothing is refetched in the
    background and failed fetches are not retried.
    """

    def __init__(self, stale_time=math.inf, clock=time.monotonic):
        self.stale_time = stale_time
        self._clock = clock
        self._entries = {}

    def __contains__(self, key):
        return self._fresh(key)

    def __len__(self):
        return len(self._entries)

    def _fresh(self, key):
        entry = self._entries.get(key)
        return entry is not None and self._clock() - entry[0] < self.stale_time

    def get(self, key, default=None):
        if self._fresh(key):
            return self._entries[key][1]
        return default

    def set(self, key, value):
        self._entries[key] = (self._clock(), value)

    def fetch(self, key, loader):
        """Cached value for `key`, calling `loader()` once on a miss."""
        if self._fresh(key):
            return self._entries[key][1]
        value = loader()
        self.set(key, value)
        return value

    def invalidate(self, *prefixes):
        """Drop every key equal to or nested under one of `prefixes`; no args clears all."""
        if not prefixes:
            dropped = len(self._entries)
            self._entries.clear()
            return dropped
        bases = [p.rstrip("/") for p in prefixes]
        doomed = [
            key for key in self._entries
            if any(key == b or key.startswith((b + "/", b + "?")) for b in bases)
        ]
        for key in doomed:
            del self._entries[key]
        if doomed:
            log.debug("Invalidated %s", doomed)
        return len(doomed)
