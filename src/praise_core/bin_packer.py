"""First-fit packing of items into bins of a target size.

Each replica is packed on its own and the resulting bins are pooled into one
flat list. Items heavier than the target never share a bin; they are returned
as singleton "oversized" bins instead of being dropped.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Sequence

from .config import DEFAULT_BIN_SIZE_SLACK
from .errors import ValidationError
from .models import Bin, Item

logger = logging.getLogger(__name__)


@dataclass
class PackingOutput:
    """Bins filled up to the target plus items that exceeded it."""

    bins: List[List[Item]] = field(default_factory=list)
    oversized: List[Item] = field(default_factory=list)

    def as_bins(self) -> List[Bin]:
        return [Bin(items=tuple(b)) for b in self.bins] + [Bin(items=(item,)) for item in self.oversized]


def target_bin_size(per_worker_target: int, slack: float = DEFAULT_BIN_SIZE_SLACK) -> int:
    """Bin capacity derived from the per-worker target plus slack."""

    if per_worker_target < 1:
        raise ValidationError("per_worker_target must be at least 1")
    return math.ceil(per_worker_target * slack)


def first_fit(items: Sequence[Item], target_size: int) -> PackingOutput:
    """Place each item, in the given order, into the first bin with room for it."""

    if target_size <= 0:
        raise ValidationError("target_bin_size must be positive")

    output = PackingOutput()
    totals: List[int] = []

    for item in items:
        if item.weight > target_size:
            output.oversized.append(item)
            continue

        for idx, total in enumerate(totals):
            if total + item.weight <= target_size:
                output.bins[idx].append(item)
                totals[idx] += item.weight
                break
        else:
            output.bins.append([item])
            totals.append(item.weight)

    return output


def pack_replicas(
    replicas: Sequence[Sequence[Item]],
    target_size: int,
    rng: random.Random | None = None,
) -> List[Bin]:
    """Pack every replica independently and pool the bins.

    When `rng` is given each replica is shuffled before packing, so the same
    receivers are unlikely to end up grouped together in every replica.
    """

    pooled: List[Bin] = []
    for index, replica in enumerate(replicas):
        ordered = list(replica)
        if rng is not None:
            rng.shuffle(ordered)
        output = first_fit(ordered, target_size)
        bins = output.as_bins()
        logger.debug(
            "Replica %d packed into %d bin(s) (%d oversized, target=%d)",
            index,
            len(bins),
            len(output.oversized),
            target_size,
        )
        pooled.extend(bins)
    return pooled
