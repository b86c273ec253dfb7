"""
Query cache for the console client.

Cached lists are only ever replaced by refetching after an invalidation,
never patched in place. Each key carries a generation counter: a load that
started before `invalidate` is handed back to its caller but not stored.
"""
import logging
import threading

logger = logging.getLogger(__name__)

BOOKINGS = "bookings"
INVOICES = "invoices"
LOCATIONS = "locations"


class QueryCache:
    def __init__(self):
        self._lock = threading.Lock()
        self._entries = {}
        self._generations = {}

    def fetch(self, key, loader):
        with self._lock:
            if key in self._entries:
                return self._entries[key]
            generation = self._generations.get(key, 0)

        value = loader()

        with self._lock:
            if self._generations.get(key, 0) == generation:
                self._entries[key] = value
            else:
                logger.debug("Dropping stale %s response (invalidated while loading)", key)
        return value

    def invalidate(self, *keys):
        with self._lock:
            for key in keys:
                self._entries.pop(key, None)
                self._generations[key] = self._generations.get(key, 0) + 1
        logger.debug("Invalidated %s", ", ".join(keys))

    def __contains__(self, key):
        with self._lock:
            return key in self._entries
