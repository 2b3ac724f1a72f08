from datetime import datetime, timezone

import pytest

from pointforge.errors import StateValidationError
from pointforge.state.models import AchievementProgress, PlayerState, PrestigeState, parse_timestamp


def test_fresh_state_defaults():
    state = PlayerState()
    assert state.current_points == 0
    assert state.points_per_click == 1
    assert state.points_per_second == 0
    assert state.upgrade_levels == {}
    assert state.achievements == {}
    assert state.prestige == PrestigeState()
    assert state.prestige.global_multiplier == 1.0
    assert state.play_start_time.tzinfo is not None


@pytest.mark.parametrize(
    "kwargs",
    [{"current_points": -1}, {"points_per_click": 0}, {"points_per_second": -1}],
)
def test_invalid_construction_rejected(kwargs):
    with pytest.raises(StateValidationError):
        PlayerState(**kwargs)


def test_achievement_record_is_created_on_demand():
    state = PlayerState()
    record = state.achievement("a")
    assert record == AchievementProgress()
    assert state.achievement("a") is record


def test_from_dict_fills_missing_fields():
    state = PlayerState.from_dict({"current_points": 5})
    assert state.current_points == 5
    assert state.points_per_click == 1
    assert state.prestige.level == 0


@pytest.mark.parametrize(
    "data",
    [
        {"current_points": -3},
        {"current_points": "lots"},
        {"current_points": True},
        {"current_points": 2**64},
        {"upgrade_levels": [1, 2]},
        {"upgrade_levels": {"a": -1}},
        {"achievements": {"a": 5}},
        {"prestige": {"global_multiplier": 0.5}},
        {"play_start_time": "not a date"},
    ],
)
def test_from_dict_rejects_malformed_input(data):
    with pytest.raises(StateValidationError):
        PlayerState.from_dict(data)


def test_from_dict_rejects_non_mapping():
    with pytest.raises(StateValidationError):
        PlayerState.from_dict(["not", "a", "dict"])


def test_parse_timestamp_variants():
    aware = parse_timestamp("2024-01-01T12:00:00+00:00", "t")
    naive = parse_timestamp("2024-01-01T12:00:00", "t")
    epoch = parse_timestamp(1704110400, "t")
    expected = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
    assert aware == naive == epoch == expected
    assert parse_timestamp(None, "t") is None
    assert parse_timestamp("", "t") is None


def test_to_dict_shape():
    state = PlayerState()
    state.achievement("a").progress = 3
    data = state.to_dict()
    assert data["achievements"] == {"a": {"unlocked": False, "progress": 3, "unlocked_at": None}}
    assert data["prestige"]["upgrade_levels"] == {}
    assert isinstance(data["play_start_time"], str)
