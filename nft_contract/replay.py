"""
Used-token store for free-mint authorizations
=============================================

Tracks the one-time 32-byte authorization tokens ("hexes") that signed free
mints embed. Once a token has been consumed by a successful free mint it can
never be consumed again, by any caller, for any quantity.

Unlike a height-windowed nullifier set there is no expiry and no eviction:
entries persist for the lifetime of the collection.

API
---
    is_used(token: bytes) -> bool
    require_unused(token: bytes) -> None   # raises ProvidedHexUsed
    mark_used(token: bytes) -> None        # raises ProvidedHexUsed if already present
    size() -> int
    checkpoint() -> int / rollback(mark)   # undo tokens consumed after a checkpoint

Notes
-----
- Tokens are opaque; hex strings are accepted and normalized to 32 raw bytes.
- Thread-safety is not provided here; the runtime serializes invocations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator

from .errors import ProvidedHexUsed
from .types import to_word


@dataclass
class UsedTokenSet:
    """In-memory set with O(1) membership, keyed by the 32-byte token."""

    # insertion-ordered, so the newest entries can be popped on rollback
    _used: Dict[bytes, None] = field(default_factory=dict)

    def is_used(self, token) -> bool:
        return to_word(token, name="auth token") in self._used

    def require_unused(self, token) -> None:
        if self.is_used(token):
            raise ProvidedHexUsed()

    def mark_used(self, token) -> None:
        t = to_word(token, name="auth token")
        if t in self._used:
            raise ProvidedHexUsed()
        self._used[t] = None

    def size(self) -> int:
        return len(self._used)

    def checkpoint(self) -> int:
        return len(self._used)

    def rollback(self, mark: int) -> None:
        while len(self._used) > mark:
            self._used.popitem()

    def __contains__(self, token) -> bool:
        return self.is_used(token)

    def __iter__(self) -> Iterator[bytes]:
        return iter(sorted(self._used))


__all__ = ["UsedTokenSet"]
