"""Novelty tracking for spot identities (core domain)."""

from __future__ import annotations

from collections import OrderedDict
from typing import Hashable

DEFAULT_CAPACITY = 1000


class NoveltyTracker:
    """Bounded set of identities already handled this session.

    Insertion order alone decides eviction: once the set grows past
    `capacity`, the oldest-inserted identities are dropped. Lookups never
    refresh an entry.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._seen: OrderedDict[Hashable, None] = OrderedDict()

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, identity: Hashable) -> bool:
        return identity in self._seen

    @property
    def capacity(self) -> int:
        return self._capacity

    def is_new(self, identity: Hashable) -> bool:
        return identity not in self._seen

    def mark_seen(self, identity: Hashable) -> None:
        if identity in self._seen:
            return
        self._seen[identity] = None
        while len(self._seen) > self._capacity:
            self._seen.popitem(last=False)

    def offer(self, identity: Hashable) -> bool:
        """Mark the identity and return True if it had not been seen before."""

        if not self.is_new(identity):
            return False
        self.mark_seen(identity)
        return True
