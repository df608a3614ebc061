import logging

import pytest

from praise_core.errors import InternalServerError
from praise_core.models import AssignmentResult, Item, Worker
from praise_core.verifier import verify_coverage


def _result(assigned: int, unassigned: int) -> AssignmentResult:
    worker = Worker(
        id="w1",
        assigned_items=[Item(id="r1", weight=assigned, sub_unit_ids=tuple(f"p{n}" for n in range(assigned)))],
    )
    return AssignmentResult(worker_assignments=[worker], unassigned_bin_count=1, unassigned_sub_unit_count=unassigned)


def test_coverage_match_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="praise_core.verifier")

    verify_coverage(total_sub_units=5, redundancy_factor=2, result=_result(assigned=7, unassigned=3))

    assert "10 / 10" in caplog.text


def test_coverage_mismatch_raises(caplog: pytest.LogCaptureFixture) -> None:
    with pytest.raises(InternalServerError, match="9 / 10"):
        verify_coverage(total_sub_units=5, redundancy_factor=2, result=_result(assigned=7, unassigned=2))

    assert "expected=10" in caplog.text
