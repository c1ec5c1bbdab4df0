import logging
import math
import time
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, field
from typing import Any, Literal

logger = logging.getLogger("pactweb.cache")

TagKind = Literal["Pact", "Activity", "User"]


@dataclass(frozen=True, slots=True)
class CacheTag:
    kind: TagKind
    id: str | None = None


@dataclass(slots=True)
class _Entry:
    value: Any
    expires_at: float
    tags: frozenset[CacheTag] = field(default_factory=frozenset)


class QueryCache:
    """TTL cache for backend reads, invalidated by tags after writes.

    Invalidating a bare kind (``CacheTag("Pact")``) drops every entry carrying
    any tag of that kind; a tag with an id drops only entries carrying that
    exact tag.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, max_entries: int = 1024) -> None:
        self._clock = clock
        self._max_entries = max_entries
        self._entries: dict[Hashable, _Entry] = {}
        self._next_expiry = math.inf

    def get(self, key: Hashable) -> tuple[bool, Any]:
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return False, None
        return True, entry.value

    def put(self, key: Hashable, value: Any, ttl: float, tags: Iterable[CacheTag] = ()) -> None:
        if ttl <= 0:
            return
        now = self._clock()
        if now >= self._next_expiry:
            self._purge_expired(now)
        self._entries.pop(key, None)
        while len(self._entries) >= self._max_entries:
            # Oldest insertion goes first.
            del self._entries[next(iter(self._entries))]
        expires_at = now + ttl
        self._entries[key] = _Entry(value=value, expires_at=expires_at, tags=frozenset(tags))
        self._next_expiry = min(self._next_expiry, expires_at)

    def _purge_expired(self, now: float) -> None:
        stale = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in stale:
            del self._entries[key]
        self._next_expiry = min((e.expires_at for e in self._entries.values()), default=math.inf)

    def invalidate(self, *tags: CacheTag) -> int:
        kinds = {t.kind for t in tags if t.id is None}
        exact = {t for t in tags if t.id is not None}
        stale = [
            key
            for key, entry in self._entries.items()
            if any(t.kind in kinds or t in exact for t in entry.tags)
        ]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("invalidated %d cached queries for %s", len(stale), tags)
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
        self._next_expiry = math.inf

    def __len__(self) -> int:
        return len(self._entries)
