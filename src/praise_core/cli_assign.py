"""Dry-run quantifier assignment for a period."""

from __future__ import annotations

import argparse
import json
import logging
import os
import random
import re
import sys
from pathlib import Path

import yaml
from sqlalchemy.exc import SQLAlchemyError

from .collectors import ItemCollector, WorkerPoolCollector
from .db_connector import make_engine
from .engine import AssignmentEngine
from .errors import InternalServerError, NotFoundError, ValidationError
from .models import AssignmentResult
from .periods import PeriodRepository

logger = logging.getLogger("praise_assign")


def _setup_logging(verbose: bool = False, json_output: bool = False) -> None:
    # --json reserves stdout for the result document
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s praise-assign %(message)s",
        handlers=[logging.StreamHandler(sys.stderr if json_output else sys.stdout)],
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute quantifier assignments for a period (dry run).")
    parser.add_argument("--period-id", required=True, help="Identifier of the period to assign.")
    parser.add_argument("--config", default=None, help="Path to config (json or yaml) with a database.url entry.")
    parser.add_argument("--db-url", default=None, help="Database URL; overrides database.url from --config.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for worker/item shuffling (reproducible runs).")
    parser.add_argument("--json", action="store_true", help="Print the full assignment result as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)
    if args.config is None and args.db_url is None:
        parser.error("one of --config or --db-url is required")
    return args


_PLACEHOLDER = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::([^}]*))?\}")


def _expand_env(text: str) -> str:
    """Expand ${VAR} and ${VAR:default} references from the environment."""

    def _lookup(match: re.Match[str]) -> str:
        var, default = match.group(1), match.group(2)
        if var in os.environ:
            return os.environ[var]
        if default is not None:
            return default
        raise ValueError(f"Missing environment variable {var} for placeholder in config")

    return _PLACEHOLDER.sub(_lookup, text)


def _load_db_url(path: Path) -> str:
    """Read database.url from a json or yaml config file."""

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".json":
        raw = json.loads(path.read_text())
    elif suffix in {".yaml", ".yml"}:
        raw = yaml.safe_load(path.read_text())
    else:
        raise ValueError("Unsupported config format; use .json, .yaml, or .yml")

    database = raw.get("database") if isinstance(raw, dict) else None
    url = database.get("url") if isinstance(database, dict) else None
    if not url:
        raise ValueError(f"Config {path} is missing database.url")
    return _expand_env(str(url))


def _resolve_db_url(args: argparse.Namespace) -> str:
    if args.db_url:
        return str(args.db_url)
    return _load_db_url(Path(args.config))


def build_engine(db_url: str, seed: int | None = None) -> AssignmentEngine:
    """Wire the SQL collaborators into an AssignmentEngine."""

    sql_engine = make_engine(db_url)
    rng = random.Random(seed)
    return AssignmentEngine(
        periods=PeriodRepository(sql_engine),
        items=ItemCollector(sql_engine),
        workers=WorkerPoolCollector(sql_engine, rng=rng),
        rng=rng,
    )


def _print_summary(result: AssignmentResult) -> None:
    print("=== Quantifier Assignment (dry run) ===")
    print(f"Workers assigned: {len(result.worker_assignments):,}")
    print(f"Praise assigned: {result.assigned_sub_unit_count:,}")
    print(f"Unassigned bins: {result.unassigned_bin_count:,}")
    print(f"Unassigned praise: {result.unassigned_sub_unit_count:,}")
    for worker in result.worker_assignments:
        receivers = ", ".join(item.id for item in worker.assigned_items)
        print(f"WORKER: {worker.id} praise={worker.assigned_sub_unit_count} receivers={receivers}")
    print("=======================================")


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    _setup_logging(args.verbose, json_output=args.json)

    try:
        engine = build_engine(_resolve_db_url(args), seed=args.seed)
    except (OSError, ValueError, yaml.YAMLError, SQLAlchemyError) as exc:
        logger.error('stage="config" error="%s"', exc)
        raise SystemExit(1) from exc

    try:
        result = engine.compute_assignments(args.period_id)
    except (NotFoundError, ValidationError) as exc:
        print(f"Assignment failed: {exc}")
        raise SystemExit(1) from exc
    except InternalServerError as exc:
        logger.error("Assignment run failed with an internal error: %s", exc)
        raise SystemExit(2) from exc

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_summary(result)


if __name__ == "__main__":  # pragma: no cover
    main()
