"""TTL cache for registry metadata keyed by package name."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from ..config import DEFAULT_CACHE_TTL
from ..models import PackageMetadata


@dataclass(slots=True)
class _Entry:
    value: PackageMetadata
    stored_at: float


class MetadataCache:
    """Name -> metadata store whose entries expire ``ttl`` seconds after insertion.

    Failed lookups are stored like successful ones so a missing package is not
    requested again until its entry expires.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def get(self, name: str) -> PackageMetadata | None:
        """Return the cached value, or None when absent or expired."""
        entry = self._entries.get(name)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl:
            del self._entries[name]
            return None
        return entry.value

    def put(self, name: str, value: PackageMetadata) -> None:
        self._entries[name] = _Entry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._entries)
