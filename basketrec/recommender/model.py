"""Data types for the co-purchase affinity model."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional


@dataclass(frozen=True)
class ItemCounts:
    """Raw counts gathered from the transaction set.

    Attributes:
        frequency: Item name to total number of occurrences.
        co_counts: Item name to (other item name to co-occurrence count).
            Symmetric by construction.
    """

    frequency: Dict[str, int] = field(default_factory=dict)
    co_counts: Dict[str, Dict[str, int]] = field(default_factory=dict)

    @property
    def total_occurrences(self) -> int:
        return sum(self.frequency.values())


class AffinityModel:
    """Read-only item-to-item affinity scores.

    Scores are keyed by item, then by related item. Only items that were
    bought together with at least one other item appear as keys.
    """

    def __init__(self, scores: Mapping[str, Mapping[str, float]]):
        self._scores: Mapping[str, Mapping[str, float]] = MappingProxyType(
            {
                item: MappingProxyType(dict(related))
                for item, related in scores.items()
            }
        )

    def __contains__(self, item: object) -> bool:
        return item in self._scores

    def __len__(self) -> int:
        return len(self._scores)

    def __iter__(self) -> Iterator[str]:
        return iter(self._scores)

    def __repr__(self) -> str:
        return f"AffinityModel(num_products={len(self)}, num_pairs={self.num_pairs})"

    @property
    def scores(self) -> Mapping[str, Mapping[str, float]]:
        return self._scores

    @property
    def num_pairs(self) -> int:
        """Number of unordered item pairs with a score."""
        return sum(len(related) for related in self._scores.values()) // 2

    def items(self) -> List[str]:
        return list(self._scores)

    def neighbours(self, item: str) -> Mapping[str, float]:
        """Get every related item and its score, or an empty mapping."""
        return self._scores.get(item, MappingProxyType({}))

    def score(self, item: str, related_item: str) -> Optional[float]:
        """Get the affinity score for a pair, or None if they never co-occurred."""
        return self.neighbours(item).get(related_item)
