"""Redundant copies of the item sequence, one per replica."""

from __future__ import annotations

from typing import List, Sequence, Tuple, TypeVar

from .errors import ValidationError

_T = TypeVar("_T")


def rotate(items: Sequence[_T], positions: int) -> List[_T]:
    """Move the last element to the front `positions` times.

    [a, b, c, d] rotated once is [d, a, b, c].
    """

    rotated = list(items)
    if not rotated:
        return rotated
    shift = positions % len(rotated)
    if shift == 0:
        return rotated
    return rotated[-shift:] + rotated[:-shift]


def build_replicas(items: Sequence[_T], redundancy_factor: int) -> List[List[_T]]:
    """Return `redundancy_factor` copies of `items`, copy `i` rotated by `i` positions."""

    if redundancy_factor <= 0:
        raise ValidationError("redundancy_factor must be positive")
    return [rotate(items, i) for i in range(redundancy_factor)]


def zip_replicas(replicas: Sequence[Sequence[_T]]) -> List[Tuple[_T, ...]]:
    """Group the i-th element of every replica together."""

    return list(zip(*replicas))
