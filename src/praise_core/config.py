"""Assignment settings read from the period configuration."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .errors import ValidationError

DEFAULT_BIN_SIZE_SLACK = 1.2

SETTING_REDUNDANCY_FACTOR = "PRAISE_QUANTIFIERS_PER_PRAISE_RECEIVER"
SETTING_ASSIGN_EVENLY = "PRAISE_QUANTIFIERS_ASSIGN_EVENLY"
SETTING_TARGET_PER_WORKER = "PRAISE_PER_QUANTIFIER"


class DistributionMode(str, Enum):
    EVEN = "EVEN"
    TARGET_COUNT = "TARGET_COUNT"


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in {"true", "1", "yes", "on"}:
        return True
    if text in {"false", "0", "no", "off", ""}:
        return False
    raise ValidationError(f"Invalid boolean setting value: {value!r}")


def _parse_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name} must be an integer, got {value!r}") from exc


@dataclass(frozen=True)
class AssignmentSettings:
    """Parameters that control one assignment run."""

    redundancy_factor: int
    distribution_mode: DistributionMode
    target_per_worker: int | None = None
    bin_size_slack: float = DEFAULT_BIN_SIZE_SLACK

    def __post_init__(self) -> None:
        if self.redundancy_factor < 1:
            raise ValidationError("redundancy_factor must be at least 1")
        if self.distribution_mode is DistributionMode.TARGET_COUNT:
            if self.target_per_worker is None or self.target_per_worker < 1:
                raise ValidationError("target_per_worker must be at least 1 in TARGET_COUNT mode")
        if self.bin_size_slack < 1.0:
            raise ValidationError("bin_size_slack must be >= 1.0")

    @property
    def target_bin_size(self) -> int:
        if self.target_per_worker is None:
            raise ValidationError("target_per_worker is not configured")
        return math.ceil(self.target_per_worker * self.bin_size_slack)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "AssignmentSettings":
        """Build settings from raw period setting values keyed by setting name."""

        if SETTING_REDUNDANCY_FACTOR not in raw:
            raise ValidationError(f"{SETTING_REDUNDANCY_FACTOR} is required")
        redundancy = _parse_int(SETTING_REDUNDANCY_FACTOR, raw[SETTING_REDUNDANCY_FACTOR])
        evenly = parse_bool(raw.get(SETTING_ASSIGN_EVENLY) or False)

        target_raw = raw.get(SETTING_TARGET_PER_WORKER)
        target = _parse_int(SETTING_TARGET_PER_WORKER, target_raw) if target_raw not in (None, "") else None

        return cls(
            redundancy_factor=redundancy,
            distribution_mode=DistributionMode.EVEN if evenly else DistributionMode.TARGET_COUNT,
            target_per_worker=target,
        )

    @classmethod
    def from_env(cls, raw: Mapping[str, Any] | None = None) -> "AssignmentSettings":
        """Build settings from `raw` with environment overrides applied on top."""

        merged = dict(raw or {})
        env_map = {
            "PRAISE_ASSIGN_REDUNDANCY_FACTOR": SETTING_REDUNDANCY_FACTOR,
            "PRAISE_ASSIGN_EVENLY": SETTING_ASSIGN_EVENLY,
            "PRAISE_ASSIGN_TARGET_PER_WORKER": SETTING_TARGET_PER_WORKER,
        }
        for env_name, setting in env_map.items():
            value = os.environ.get(env_name)
            if value is not None:
                merged[setting] = value
        return cls.from_mapping(merged)
