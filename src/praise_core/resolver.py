"""Match packed bins to workers while honoring disqualifications.

This is a best-effort greedy pass with a single retry per (worker, bin)
pairing, not an optimal matching. Some bins can stay unassigned even when a
different worker ordering would have placed them; callers hand those over for
manual resolution.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import replace
from typing import Deque, List, Sequence, Set

from .errors import InternalServerError
from .models import AssignmentOption, AssignmentResult, Bin, Worker

logger = logging.getLogger(__name__)


def _attempt_limit(worker_count: int, bin_count: int) -> int:
    return 2 * max(worker_count, 1) * max(bin_count, 1)


def resolve_assignments(bins: Sequence[Bin], workers: Sequence[Worker]) -> AssignmentResult:
    """Give each worker at most one bin, never one it is disqualified from.

    Bins and workers are both consumed from the end of their lists. On the
    first conflict for a pairing the worker goes to the front of the worker
    queue and the bin is retried with the next worker. A repeated conflict for
    the same pairing parks the bin as unassigned and drops that worker for the
    rest of the run.

    The caller's workers are left untouched; assignments are recorded on
    copies, which are what `worker_assignments` holds.
    """

    pool = [replace(worker, assigned_items=[]) for worker in workers]
    available_workers: Deque[Worker] = deque(pool)
    available_bins: List[Bin] = list(bins)
    skipped_bins: List[Bin] = []
    skipped_option_ids: Set[AssignmentOption] = set()

    limit = _attempt_limit(len(workers), len(bins))
    attempts = 0

    while available_bins:
        assignment_bin = available_bins.pop()

        if not available_workers:
            skipped_bins.append(assignment_bin)
            continue

        worker = available_workers.pop()
        attempts += 1
        if attempts > limit:
            raise InternalServerError(
                f"Assignment resolution exceeded {limit} pairing attempts "
                f"(workers={len(workers)}, bins={len(bins)})"
            )

        option_id: AssignmentOption = (worker.id, assignment_bin.fingerprint)

        if not worker.is_disqualified_from(assignment_bin):
            worker.assigned_items.extend(assignment_bin.items)
            logger.debug("Assigned bin of %d item(s) to worker %s", len(assignment_bin.items), worker.id)
        elif option_id in skipped_option_ids:
            skipped_bins.append(assignment_bin)
            logger.debug("Worker %s rejected the same bin twice; bin left unassigned", worker.id)
        else:
            available_workers.appendleft(worker)
            available_bins.append(assignment_bin)
            skipped_option_ids.add(option_id)

    worker_assignments = [worker for worker in pool if worker.assigned_items]
    unassigned_sub_units = sum(b.sub_unit_count for b in skipped_bins)

    logger.info(
        "Resolved %d bin(s): %d worker(s) assigned, %d bin(s) / %d sub-unit(s) unassigned, %d pairing attempt(s)",
        len(bins),
        len(worker_assignments),
        len(skipped_bins),
        unassigned_sub_units,
        attempts,
    )

    return AssignmentResult(
        worker_assignments=worker_assignments,
        unassigned_bin_count=len(skipped_bins),
        unassigned_sub_unit_count=unassigned_sub_units,
        pairing_attempts=attempts,
    )
