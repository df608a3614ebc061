from collections import Counter

import pytest

from praise_core import even_partitioner
from praise_core.errors import ValidationError
from praise_core.even_partitioner import greedy_partition, partition_evenly
from praise_core.models import Item
from praise_core.replication import build_replicas


def _item(item_id: str, weight: int) -> Item:
    return Item(id=item_id, weight=weight, sub_unit_ids=tuple(f"{item_id}-{n}" for n in range(weight)))


def test_greedy_partition_puts_heaviest_into_lightest_bin() -> None:
    partitions = greedy_partition([5, 4, 3, 2, 1], 2, lambda x: x)

    assert partitions == [[5, 2, 1], [4, 3]]


def test_greedy_partition_returns_fixed_bin_count() -> None:
    partitions = greedy_partition([3], 4, lambda x: x)

    assert partitions == [[3], [], [], []]


def test_partition_evenly_keeps_groups_together() -> None:
    items = [_item("a", 3), _item("b", 2), _item("c", 1)]
    replicas = build_replicas(items, 2)

    bins = partition_evenly(replicas, 3)

    assert [[i.id for i in b.items] for b in bins] == [["b", "a"], ["a", "c"], ["c", "b"]]
    assert sum(b.total_weight for b in bins) == 2 * 6
    assert all(len(b.identities) == len(b.items) for b in bins)


def test_partition_evenly_balances_weight() -> None:
    items = [_item(f"r{n}", weight) for n, weight in enumerate([9, 7, 6, 5, 5, 4, 3, 2, 2, 1])]
    bins = partition_evenly(build_replicas(items, 2), 4)

    totals = [b.total_weight for b in bins]
    assert len(bins) == 4
    assert sum(totals) == 2 * 44
    assert max(totals) - min(totals) <= 2 * 9


def test_capacity_precondition_fails_before_partitioning(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(*args: object, **kwargs: object) -> None:
        raise AssertionError("partitioning must not start")

    monkeypatch.setattr(even_partitioner, "greedy_partition", _fail)
    replicas = build_replicas([_item("a", 1), _item("b", 1)], 3)

    with pytest.raises(ValidationError, match="insufficient pool size"):
        partition_evenly(replicas, 2)


@pytest.mark.parametrize("pool_size", [3, 4, 7, 15])
@pytest.mark.parametrize("redundancy", [1, 2, 3])
def test_every_sub_unit_partitioned_exactly_redundancy_times(pool_size: int, redundancy: int) -> None:
    items = [_item(f"r{n}", weight) for n, weight in enumerate([0, 8, 1, 4, 2, 6, 3, 3, 5, 1])]

    bins = partition_evenly(build_replicas(items, redundancy), pool_size)

    counts = Counter(sub_id for b in bins for item in b.items for sub_id in item.sub_unit_ids)
    assert len(bins) == pool_size
    assert dict(counts) == {sub_id: redundancy for item in items for sub_id in item.sub_unit_ids}
