"""Collect the items and workers for one assignment run."""

from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Dict, List

from sqlalchemy import and_, asc, func, select
from sqlalchemy.engine import Engine

from .db_connector import SqlSource
from .models import Item, Worker
from .schema import praise, user_accounts, users

logger = logging.getLogger(__name__)


class ItemCollector(SqlSource):
    """Groups praise in a window into one weighted item per receiver."""

    def _window_condition(self, start: datetime, end: datetime):
        return and_(praise.c.created_at > start, praise.c.created_at <= end)

    def fetch_items_in_window(self, start: datetime, end: datetime) -> List[Item]:
        """Return items for praise in (start, end], heaviest first.

        Equal weights are ordered by receiver id so the sequence is stable.
        """

        stmt = (
            select(praise.c.id, praise.c.receiver_id)
            .where(self._window_condition(start, end))
            .order_by(asc(praise.c.created_at), asc(praise.c.id))
        )
        rows = self._query(stmt)

        grouped: Dict[str, List[str]] = {}
        for row in rows:
            grouped.setdefault(str(row["receiver_id"]), []).append(str(row["id"]))

        items = [Item(id=receiver, weight=len(ids), sub_unit_ids=tuple(ids)) for receiver, ids in grouped.items()]
        items.sort(key=lambda item: (-item.weight, item.id))
        logger.info("Collected %d receiver(s) with %d praise in window (%s, %s]", len(items), len(rows), start, end)
        return items

    def count_sub_units_in_window(self, start: datetime, end: datetime) -> int:
        """Count praise in (start, end] directly, independent of item grouping."""

        stmt = select(func.count().label("total")).select_from(praise).where(self._window_condition(start, end))
        rows = self._query(stmt)
        return int(rows[0]["total"]) if rows else 0


class WorkerPoolCollector(SqlSource):
    """Loads every quantifier with the account ids it is disqualified from."""

    def __init__(
        self,
        engine: Engine,
        rng: random.Random | None = None,
        max_retries: int = 3,
        backoff_base: float = 0.1,
    ) -> None:
        super().__init__(engine, max_retries=max_retries, backoff_base=backoff_base)
        self._rng = rng or random.Random()

    def fetch_eligible_workers(self) -> List[Worker]:
        """Return all quantifiers in random order; may be empty."""

        stmt = (
            select(users.c.id.label("user_id"), user_accounts.c.id.label("account_id"))
            .select_from(users.outerjoin(user_accounts, user_accounts.c.user_id == users.c.id))
            .where(users.c.is_quantifier.is_(True))
            .order_by(asc(users.c.id))
        )
        rows = self._query(stmt)

        accounts: Dict[str, set[str]] = {}
        for row in rows:
            owned = accounts.setdefault(str(row["user_id"]), set())
            if row["account_id"] is not None:
                owned.add(str(row["account_id"]))

        workers = [Worker(id=user_id, disqualified_ids=frozenset(ids)) for user_id, ids in accounts.items()]
        self._rng.shuffle(workers)
        logger.info("Collected %d eligible worker(s)", len(workers))
        return workers
