"""Shared SQLAlchemy plumbing for the read-only collaborator queries."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping, Sequence, TypeVar, cast

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.sql import Select

_T = TypeVar("_T")

logger = logging.getLogger(__name__)


def make_engine(db_url: str, pool_size: int = 5, max_overflow: int = 10) -> Engine:
    """Create an engine with pre-ping; pool sizing is skipped for SQLite."""

    engine_kwargs: dict[str, Any] = {
        "pool_pre_ping": True,
        "future": True,
    }
    if not db_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = pool_size
        engine_kwargs["max_overflow"] = max_overflow
    return create_engine(db_url, **engine_kwargs)


class SqlSource:
    """Base for collectors: executes selects and retries transient connection errors."""

    def __init__(self, engine: Engine, max_retries: int = 3, backoff_base: float = 0.1) -> None:
        self._engine = engine
        self._max_retries = max_retries
        self._backoff_base = backoff_base

    def _execute(self, stmt: Select[Any]) -> Sequence[Mapping[str, Any]]:
        with self._engine.connect() as conn:
            result = conn.execute(stmt)
            rows = result.mappings().all()
        return cast(Sequence[Mapping[str, Any]], rows)

    def _query(self, stmt: Select[Any]) -> Sequence[Mapping[str, Any]]:
        return self._with_retry(lambda: self._execute(stmt))

    def _with_retry(self, func: Callable[[], _T]) -> _T:
        attempt = 0
        while True:
            try:
                return func()
            except (OperationalError, DBAPIError) as exc:
                attempt += 1
                should_retry = isinstance(exc, OperationalError) or (
                    isinstance(exc, DBAPIError) and exc.connection_invalidated
                )
                if attempt > self._max_retries or not should_retry:
                    raise
                sleep_for = self._backoff_base * (2 ** (attempt - 1))
                logger.warning("Transient database error (attempt %d/%d): %s", attempt, self._max_retries, exc)
                time.sleep(sleep_for)
