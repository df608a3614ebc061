"""Period windows and per-period assignment settings."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import desc, select

from .config import (
    SETTING_ASSIGN_EVENLY,
    SETTING_REDUNDANCY_FACTOR,
    SETTING_TARGET_PER_WORKER,
    AssignmentSettings,
    parse_bool,
)
from .db_connector import SqlSource
from .errors import NotFoundError
from .models import PeriodWindow
from .schema import period_settings, periods

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class PeriodRepository(SqlSource):
    """Read-only access to periods and their settings."""

    def get_period_window(self, period_id: str) -> PeriodWindow:
        """Return (previous period end, period end] for `period_id`.

        The first period starts at the Unix epoch.
        """

        rows = self._query(select(periods.c.end_date).where(periods.c.id == period_id))
        if not rows:
            raise NotFoundError(f"Period {period_id}")
        end_date: datetime = rows[0]["end_date"]

        previous = self._query(
            select(periods.c.end_date)
            .where(periods.c.end_date < end_date)
            .order_by(desc(periods.c.end_date))
            .limit(1)
        )
        start = previous[0]["end_date"] if previous else EPOCH
        return PeriodWindow(start=start, end=end_date)

    def get_settings(self, period_id: str) -> Dict[str, Any]:
        rows = self._query(
            select(period_settings.c.key, period_settings.c.value).where(period_settings.c.period_id == period_id)
        )
        return {str(row["key"]): row["value"] for row in rows}

    def get_assignment_settings(self, period_id: str) -> AssignmentSettings:
        """Read the redundancy factor, distribution mode and per-worker target.

        Raises:
            NotFoundError: If the redundancy factor is missing, or the per-worker
                target is missing while the period does not assign evenly.
        """

        raw = self.get_settings(period_id)
        if raw.get(SETTING_REDUNDANCY_FACTOR) is None:
            raise NotFoundError(f"Setting {SETTING_REDUNDANCY_FACTOR} for period {period_id}")
        if not parse_bool(raw.get(SETTING_ASSIGN_EVENLY) or False) and raw.get(SETTING_TARGET_PER_WORKER) is None:
            raise NotFoundError(f"Setting {SETTING_TARGET_PER_WORKER} for period {period_id}")

        settings = AssignmentSettings.from_mapping(raw)
        logger.debug("Loaded assignment settings for period %s: %s", period_id, settings)
        return settings
