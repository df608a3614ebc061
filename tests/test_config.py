import pytest

from praise_core.config import AssignmentSettings, DistributionMode
from praise_core.errors import ValidationError


def test_from_mapping_target_count_mode() -> None:
    settings = AssignmentSettings.from_mapping(
        {
            "PRAISE_QUANTIFIERS_PER_PRAISE_RECEIVER": "3",
            "PRAISE_QUANTIFIERS_ASSIGN_EVENLY": "false",
            "PRAISE_PER_QUANTIFIER": "50",
        }
    )

    assert settings.redundancy_factor == 3
    assert settings.distribution_mode is DistributionMode.TARGET_COUNT
    assert settings.target_per_worker == 50
    assert settings.target_bin_size == 60


def test_from_mapping_even_mode_without_target() -> None:
    settings = AssignmentSettings.from_mapping(
        {"PRAISE_QUANTIFIERS_PER_PRAISE_RECEIVER": 2, "PRAISE_QUANTIFIERS_ASSIGN_EVENLY": True}
    )

    assert settings.distribution_mode is DistributionMode.EVEN
    assert settings.target_per_worker is None


@pytest.mark.parametrize(
    "raw",
    [
        {"PRAISE_QUANTIFIERS_PER_PRAISE_RECEIVER": "0", "PRAISE_QUANTIFIERS_ASSIGN_EVENLY": "true"},
        {"PRAISE_QUANTIFIERS_PER_PRAISE_RECEIVER": "abc", "PRAISE_QUANTIFIERS_ASSIGN_EVENLY": "true"},
        {"PRAISE_QUANTIFIERS_PER_PRAISE_RECEIVER": "2", "PRAISE_QUANTIFIERS_ASSIGN_EVENLY": "maybe"},
        {"PRAISE_QUANTIFIERS_PER_PRAISE_RECEIVER": "2"},
        {"PRAISE_QUANTIFIERS_PER_PRAISE_RECEIVER": "2", "PRAISE_PER_QUANTIFIER": "0"},
        {},
    ],
)
def test_from_mapping_validation(raw: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        AssignmentSettings.from_mapping(raw)


def test_from_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PRAISE_ASSIGN_REDUNDANCY_FACTOR", "4")
    monkeypatch.setenv("PRAISE_ASSIGN_TARGET_PER_WORKER", "10")

    settings = AssignmentSettings.from_env({"PRAISE_QUANTIFIERS_PER_PRAISE_RECEIVER": "1"})

    assert settings.redundancy_factor == 4
    assert settings.target_bin_size == 12
