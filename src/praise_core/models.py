"""Value objects shared by the collectors, packers and resolver.

Everything here is created fresh for a single scheduling run and discarded
afterwards; the engine keeps no state across runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Tuple

from .errors import ValidationError

AssignmentOption = Tuple[str, str]


@dataclass(frozen=True)
class Item:
    """All praise given to one receiver within a period window."""

    id: str
    weight: int
    sub_unit_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValidationError(f"item {self.id} has negative weight {self.weight}")
        if len(self.sub_unit_ids) != self.weight:
            raise ValidationError(f"item {self.id} has weight {self.weight} but {len(self.sub_unit_ids)} sub-unit ids")


@dataclass
class Worker:
    """A quantifier together with every identity it may not judge."""

    id: str
    disqualified_ids: FrozenSet[str] = frozenset()
    assigned_items: List[Item] = field(default_factory=list)

    def is_disqualified_from(self, bin: "Bin") -> bool:
        return not self.disqualified_ids.isdisjoint(bin.identities)

    @property
    def assigned_sub_unit_count(self) -> int:
        return sum(item.weight for item in self.assigned_items)


@dataclass(frozen=True)
class Bin:
    """One packing unit: an ordered group of items assigned together."""

    items: Tuple[Item, ...] = ()

    @property
    def total_weight(self) -> int:
        return sum(item.weight for item in self.items)

    @property
    def sub_unit_count(self) -> int:
        return sum(len(item.sub_unit_ids) for item in self.items)

    @property
    def identities(self) -> FrozenSet[str]:
        return frozenset(item.id for item in self.items)

    @property
    def fingerprint(self) -> str:
        """Order-independent identifier built from the contained sub-unit ids."""

        return "+".join(sorted(sub_id for item in self.items for sub_id in item.sub_unit_ids))


@dataclass(frozen=True)
class PeriodWindow:
    """Represents the collection window (start, end]."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class AssignmentResult:
    """Outcome of a single assignment run."""

    worker_assignments: List[Worker]
    unassigned_bin_count: int
    unassigned_sub_unit_count: int
    pairing_attempts: int = 0

    @property
    def assigned_sub_unit_count(self) -> int:
        return sum(worker.assigned_sub_unit_count for worker in self.worker_assignments)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "worker_assignments": [
                {
                    "worker_id": worker.id,
                    "items": [
                        {"id": item.id, "weight": item.weight, "sub_unit_ids": list(item.sub_unit_ids)}
                        for item in worker.assigned_items
                    ],
                }
                for worker in self.worker_assignments
            ],
            "unassigned_bin_count": self.unassigned_bin_count,
            "unassigned_sub_unit_count": self.unassigned_sub_unit_count,
        }
