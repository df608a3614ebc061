"""Accounting check run after every assignment pass."""

from __future__ import annotations

import logging

from .errors import InternalServerError
from .models import AssignmentResult

logger = logging.getLogger(__name__)


def verify_coverage(total_sub_units: int, redundancy_factor: int, result: AssignmentResult) -> None:
    """Ensure every redundant sub-unit is either assigned or reported unassigned.

    Raises:
        InternalServerError: If the assigned plus unassigned count differs from
            `total_sub_units * redundancy_factor`.
    """

    expected = total_sub_units * redundancy_factor
    assigned = result.assigned_sub_unit_count
    accounted = assigned + result.unassigned_sub_unit_count

    if accounted != expected:
        logger.error(
            "Coverage mismatch: assigned=%d unassigned=%d accounted=%d expected=%d (total=%d redundancy=%d)",
            assigned,
            result.unassigned_sub_unit_count,
            accounted,
            expected,
            total_sub_units,
            redundancy_factor,
        )
        raise InternalServerError(
            f"Not all redundant assignments accounted for: {accounted} / {expected} expected in period"
        )

    logger.info("All redundant assignments accounted for: %d / %d expected in period", accounted, expected)
