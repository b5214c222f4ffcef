"""Cross-protocol message correlation.

IRC message ids are the *source* side, Discord message ids the *target* side.
A single IRC message can map to several Discord messages (a media link sent
as header + link, a long line split into chunks) and a single Discord message
to several IRC lines (body plus one line per attachment).
"""

from __future__ import annotations

import threading
from collections import OrderedDict

from discord_ircv3.log import get_logger

logger = get_logger(__name__)


class CorrelationStore:
    """Bidirectional multimap between IRC and Discord message ids.

    Lists keep insertion order, which is the order messages were sent in.
    ``limit`` bounds the number of source ids kept; when it is exceeded the
    oldest source id is evicted together with its reverse entries.
    ``limit=0`` keeps everything for the lifetime of the process.
    """

    def __init__(self, limit: int = 0):
        self._limit = limit
        self._lock = threading.Lock()
        self._by_source: OrderedDict[str, list[str]] = OrderedDict()
        self._by_target: dict[str, list[str]] = {}

    def record_pair(self, source_id: str, target_id: str) -> None:
        """Link *source_id* (IRC) with *target_id* (Discord).

        Not idempotent: callers record each genuinely new pair once.
        """
        with self._lock:
            self._by_source.setdefault(source_id, []).append(target_id)
            self._by_target.setdefault(target_id, []).append(source_id)
            if self._limit and len(self._by_source) > self._limit:
                self._evict_oldest()

    def lookup_by_source(self, source_id: str) -> list[str]:
        """Discord ids recorded for an IRC id, oldest first."""
        with self._lock:
            return list(self._by_source.get(source_id, ()))

    def lookup_by_target(self, target_id: str) -> list[str]:
        """IRC ids recorded for a Discord id, oldest first."""
        with self._lock:
            return list(self._by_target.get(target_id, ()))

    def latest_target(self, source_id: str) -> str | None:
        """Most recently recorded Discord id for an IRC id (reply threading)."""
        targets = self.lookup_by_source(source_id)
        return targets[-1] if targets else None

    def first_source(self, target_id: str) -> str | None:
        """Earliest IRC id recorded for a Discord id (replies and reactions)."""
        sources = self.lookup_by_target(target_id)
        return sources[0] if sources else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_source)

    def _evict_oldest(self) -> None:
        source_id, targets = self._by_source.popitem(last=False)
        for target_id in targets:
            sources = self._by_target.get(target_id)
            if sources is None:
                continue
            remaining = [s for s in sources if s != source_id]
            if remaining:
                self._by_target[target_id] = remaining
            else:
                del self._by_target[target_id]
        logger.debug("correlation_evicted", source_id=source_id, targets=len(targets))
