"""Redundant quantifier assignment engine for praise periods."""

from .bin_packer import PackingOutput, first_fit, pack_replicas, target_bin_size
from .collectors import ItemCollector, WorkerPoolCollector
from .config import AssignmentSettings, DistributionMode
from .db_connector import make_engine
from .engine import AssignmentEngine
from .errors import AssignmentError, InternalServerError, NotFoundError, ValidationError
from .even_partitioner import greedy_partition, partition_evenly
from .models import AssignmentOption, AssignmentResult, Bin, Item, PeriodWindow, Worker
from .periods import PeriodRepository
from .replication import build_replicas, rotate, zip_replicas
from .resolver import resolve_assignments
from .schema import create_schema
from .verifier import verify_coverage

__all__ = [
    "Item",
    "Worker",
    "Bin",
    "AssignmentOption",
    "AssignmentResult",
    "PeriodWindow",
    "AssignmentSettings",
    "DistributionMode",
    "AssignmentError",
    "NotFoundError",
    "ValidationError",
    "InternalServerError",
    "ItemCollector",
    "WorkerPoolCollector",
    "PeriodRepository",
    "make_engine",
    "create_schema",
    "rotate",
    "build_replicas",
    "zip_replicas",
    "PackingOutput",
    "first_fit",
    "pack_replicas",
    "target_bin_size",
    "greedy_partition",
    "partition_evenly",
    "resolve_assignments",
    "verify_coverage",
    "AssignmentEngine",
]
