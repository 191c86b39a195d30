"""Relation-type registry and edge mask encoding for synset-rank."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from synset_rank.exceptions import RelationTypeOverflowError

# Edge masks are stored as unsigned 32-bit integers, one bit per type.
MASK_WIDTH = 32

# Relation type given to the links between a word and its synsets.
WORD_RELATION = "word"


class RelationTypeRegistry:
    """Append-only, insertion-ordered set of relation-type names.

    The position of a name is its bit index in edge masks, so names are
    never removed or reordered.
    """

    def __init__(
        self, names: Iterable[str] = (), capacity: int = MASK_WIDTH
    ) -> None:
        self._capacity = capacity
        self._names: list[str] = []
        self._index: dict[str, int] = {}
        for name in names:
            self.register(name)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def names(self) -> list[str]:
        """Registered names in registration order."""
        return list(self._names)

    def bit(self, name: str) -> int | None:
        """Bit index of a registered name, or None."""
        return self._index.get(name)

    def register(self, name: str) -> int:
        """Register a name if needed and return its bit index."""
        idx = self._index.get(name)
        if idx is not None:
            return idx
        if len(self._names) >= self._capacity:
            raise RelationTypeOverflowError(
                f"Cannot register relation type {name!r}: registry holds "
                f"{self._capacity} types already"
            )
        idx = len(self._names)
        self._names.append(name)
        self._index[name] = idx
        return idx

    def add_to_mask(self, mask: int, name: str) -> int:
        """Return ``mask`` with the bit for ``name`` set."""
        return mask | (1 << self.register(name))

    def decode(self, mask: int) -> list[str]:
        """Names whose bit is set in ``mask``, in registration order."""
        return [
            name for idx, name in enumerate(self._names) if mask & (1 << idx)
        ]
