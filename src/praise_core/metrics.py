"""Prometheus metrics for assignment runs."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

PRAISE_ASSIGNMENT_RUNS_TOTAL = Counter(
    "praise_assignment_runs_total",
    "Number of assignment runs executed",
    ["mode", "status"],
)

PRAISE_ASSIGNMENT_DURATION_SECONDS = Histogram(
    "praise_assignment_duration_seconds",
    "Duration of assignment runs in seconds",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0],
)

PRAISE_ASSIGNMENT_BINS_TOTAL = Counter(
    "praise_assignment_bins_total",
    "Total number of bins produced by the packers",
    ["mode"],
)

PRAISE_ASSIGNMENT_UNASSIGNED_BINS = Gauge(
    "praise_assignment_unassigned_bins",
    "Bins left unassigned by the most recent run",
)

PRAISE_ASSIGNMENT_UNASSIGNED_SUB_UNITS = Gauge(
    "praise_assignment_unassigned_sub_units",
    "Praise left unassigned by the most recent run (counted per replica)",
)

PRAISE_ASSIGNMENT_PAIRING_ATTEMPTS = Histogram(
    "praise_assignment_pairing_attempts",
    "Worker/bin pairing attempts made by the resolver per run",
    buckets=[1, 10, 100, 1_000, 10_000, 100_000],
)

__all__ = [
    "PRAISE_ASSIGNMENT_RUNS_TOTAL",
    "PRAISE_ASSIGNMENT_DURATION_SECONDS",
    "PRAISE_ASSIGNMENT_BINS_TOTAL",
    "PRAISE_ASSIGNMENT_UNASSIGNED_BINS",
    "PRAISE_ASSIGNMENT_UNASSIGNED_SUB_UNITS",
    "PRAISE_ASSIGNMENT_PAIRING_ATTEMPTS",
]
