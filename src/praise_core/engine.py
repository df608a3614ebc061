"""Orchestrates one assignment run: collect -> replicate -> pack -> resolve -> verify."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from datetime import datetime
from typing import List, Protocol, Tuple

from .bin_packer import pack_replicas
from .config import AssignmentSettings, DistributionMode
from .even_partitioner import partition_evenly
from .metrics import (
    PRAISE_ASSIGNMENT_BINS_TOTAL,
    PRAISE_ASSIGNMENT_DURATION_SECONDS,
    PRAISE_ASSIGNMENT_PAIRING_ATTEMPTS,
    PRAISE_ASSIGNMENT_RUNS_TOTAL,
    PRAISE_ASSIGNMENT_UNASSIGNED_BINS,
    PRAISE_ASSIGNMENT_UNASSIGNED_SUB_UNITS,
)
from .models import AssignmentResult, Bin, Item, PeriodWindow, Worker
from .replication import build_replicas, zip_replicas
from .resolver import resolve_assignments
from .verifier import verify_coverage

logger = logging.getLogger(__name__)


class PeriodSourceInterface(Protocol):
    """Subset of PeriodRepository used by the engine."""

    def get_period_window(self, period_id: str) -> PeriodWindow: ...

    def get_assignment_settings(self, period_id: str) -> AssignmentSettings: ...


class ItemSourceInterface(Protocol):
    """Subset of ItemCollector used by the engine."""

    def fetch_items_in_window(self, start: datetime, end: datetime) -> List[Item]: ...

    def count_sub_units_in_window(self, start: datetime, end: datetime) -> int: ...


class WorkerSourceInterface(Protocol):
    """Subset of WorkerPoolCollector used by the engine."""

    def fetch_eligible_workers(self) -> List[Worker]: ...


class AssignmentEngine:
    """Computes quantifier assignments for a period without persisting anything.

    The engine keeps no state between runs. Runs for the same period must be
    serialized by the caller.
    """

    def __init__(
        self,
        periods: PeriodSourceInterface,
        items: ItemSourceInterface,
        workers: WorkerSourceInterface,
        rng: random.Random | None = None,
        shuffle_items: bool = True,
    ) -> None:
        self._periods = periods
        self._items = items
        self._workers = workers
        self._rng = rng or random.Random()
        self._shuffle_items = shuffle_items

    def compute_assignments(self, period_id: str) -> AssignmentResult:
        """Run a full assignment pass for `period_id`.

        Raises:
            NotFoundError: The period or one of its settings does not exist.
            ValidationError: Settings are inconsistent with the worker pool.
            InternalServerError: Coverage accounting failed.
        """

        start = time.monotonic()
        mode = "unknown"
        status = "success"
        try:
            window, settings = self._load_period(period_id)
            mode = settings.distribution_mode.value
            items = self._items.fetch_items_in_window(window.start, window.end)
            workers = self._workers.fetch_eligible_workers()
            total_sub_units = self._items.count_sub_units_in_window(window.start, window.end)
            return self._assign(period_id, settings, items, workers, total_sub_units)
        except Exception:
            status = "failure"
            raise
        finally:
            self._record_run(mode, status, start)

    async def compute_assignments_async(self, period_id: str) -> AssignmentResult:
        """Same as `compute_assignments`; every collaborator query runs in a worker thread.

        Items, workers and the sub-unit total are fetched concurrently.
        """

        start = time.monotonic()
        mode = "unknown"
        status = "success"
        try:
            window, settings = await asyncio.to_thread(self._load_period, period_id)
            mode = settings.distribution_mode.value
            items, workers, total_sub_units = await asyncio.gather(
                asyncio.to_thread(self._items.fetch_items_in_window, window.start, window.end),
                asyncio.to_thread(self._workers.fetch_eligible_workers),
                asyncio.to_thread(self._items.count_sub_units_in_window, window.start, window.end),
            )
            return self._assign(period_id, settings, items, workers, total_sub_units)
        except Exception:
            status = "failure"
            raise
        finally:
            self._record_run(mode, status, start)

    def _load_period(self, period_id: str) -> Tuple[PeriodWindow, AssignmentSettings]:
        window = self._periods.get_period_window(period_id)
        settings = self._periods.get_assignment_settings(period_id)
        return window, settings

    def _assign(
        self,
        period_id: str,
        settings: AssignmentSettings,
        items: List[Item],
        workers: List[Worker],
        total_sub_units: int,
    ) -> AssignmentResult:
        logger.info(
            "Computing assignments for period %s: %d item(s), %d worker(s), redundancy=%d, mode=%s",
            period_id,
            len(items),
            len(workers),
            settings.redundancy_factor,
            settings.distribution_mode.value,
        )

        bins = self._build_bins(settings, items, workers)
        PRAISE_ASSIGNMENT_BINS_TOTAL.labels(mode=settings.distribution_mode.value).inc(len(bins))

        result = resolve_assignments(bins, workers)

        verify_coverage(total_sub_units, settings.redundancy_factor, result)

        PRAISE_ASSIGNMENT_UNASSIGNED_BINS.set(result.unassigned_bin_count)
        PRAISE_ASSIGNMENT_UNASSIGNED_SUB_UNITS.set(result.unassigned_sub_unit_count)
        PRAISE_ASSIGNMENT_PAIRING_ATTEMPTS.observe(result.pairing_attempts)
        return result

    def _build_bins(self, settings: AssignmentSettings, items: List[Item], workers: List[Worker]) -> List[Bin]:
        replicas = build_replicas(items, settings.redundancy_factor)

        if settings.distribution_mode is DistributionMode.EVEN:
            if not workers:
                # Nobody to partition for; every group is reported unassigned.
                logger.warning("Worker pool is empty; all items will be left unassigned")
                return [Bin(items=group) for group in zip_replicas(replicas)]
            return partition_evenly(replicas, len(workers))

        rng = self._rng if self._shuffle_items else None
        return pack_replicas(replicas, settings.target_bin_size, rng=rng)

    @staticmethod
    def _record_run(mode: str, status: str, start: float) -> None:
        PRAISE_ASSIGNMENT_RUNS_TOTAL.labels(mode=mode, status=status).inc()
        PRAISE_ASSIGNMENT_DURATION_SECONDS.observe(time.monotonic() - start)
