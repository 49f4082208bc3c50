"""Search data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import total_ordering


@dataclass(frozen=True, slots=True)
class Entry:
    """A word occurs ``count`` times in document ``doc_id``."""

    doc_id: int
    count: int

    def to_dict(self) -> dict[str, int]:
        return {"doc_id": self.doc_id, "count": self.count}


@total_ordering
@dataclass(frozen=True, slots=True)
class RelativeIndex:
    """Ranked search hit for a single document.

    Equality only considers ``doc_id`` and ``rank``. Ordering places higher
    ranks first and breaks ties by ascending ``doc_id``, so ``sorted()`` yields
    results in presentation order.
    """

    doc_id: int
    rank: float
    absolute_relevance: int = field(default=0, compare=False)

    @property
    def sort_key(self) -> tuple[float, int]:
        return (-self.rank, self.doc_id)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RelativeIndex):
            return NotImplemented
        return self.sort_key < other.sort_key

    def as_pair(self) -> tuple[int, float]:
        """Return the ``(doc_id, rank)`` pair handed to result sinks."""
        return (self.doc_id, self.rank)
