"""Greedy multiway number partitioning over a fixed number of bins."""

from __future__ import annotations

import heapq
from typing import Callable, List, Sequence, Tuple, TypeVar

from .errors import ValidationError
from .models import Bin, Item
from .replication import zip_replicas

_T = TypeVar("_T")


def greedy_partition(groups: Sequence[_T], bin_count: int, weight: Callable[[_T], int]) -> List[List[_T]]:
    """Assign the heaviest remaining group to the lightest bin until none remain.

    Ties between equally light bins go to the lowest bin index; equal-weight
    groups keep their input order.
    """

    if bin_count <= 0:
        raise ValidationError("bin_count must be positive")

    partitions: List[List[_T]] = [[] for _ in range(bin_count)]
    heap: List[Tuple[int, int]] = [(0, idx) for idx in range(bin_count)]

    for group in sorted(groups, key=weight, reverse=True):
        total, idx = heapq.heappop(heap)
        partitions[idx].append(group)
        heapq.heappush(heap, (total + weight(group), idx))

    return partitions


def _group_weight(group: Tuple[Item, ...]) -> int:
    return sum(item.weight for item in group)


def partition_evenly(replicas: Sequence[Sequence[Item]], worker_pool_size: int) -> List[Bin]:
    """Spread the rotated replicas over exactly `worker_pool_size` bins.

    The i-th item of every replica forms one group; groups are never split.
    Some bins may be empty when there are fewer groups than workers.
    """

    if len(replicas) > worker_pool_size:
        raise ValidationError(
            "insufficient pool size for requested redundancy: "
            f"redundancy_factor={len(replicas)} worker_pool_size={worker_pool_size}"
        )

    groups = zip_replicas(replicas)
    partitions = greedy_partition(groups, worker_pool_size, _group_weight)
    return [Bin(items=tuple(item for group in partition for item in group)) for partition in partitions]
