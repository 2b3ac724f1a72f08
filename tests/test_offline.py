import pytest

from pointforge.engines import OfflineRewardsEngine
from pointforge.events import OfflineRewardsApplied

from conftest import Recorder


def test_reward_example(offline, state):
    state.points_per_second = 10
    assert offline.calculate_offline_rewards(7200) == 36_000


@pytest.mark.parametrize("seconds", [0, 1, 59, 59.9])
def test_below_minimum_is_zero(offline, state, seconds):
    state.points_per_second = 10
    assert offline.calculate_offline_rewards(seconds) == 0


def test_elapsed_time_is_capped(offline, state):
    state.points_per_second = 10
    offline.set_max_offline_hours(1)
    assert offline.calculate_offline_rewards(7200) == 10 * 0.5 * 3600


def test_no_idle_production_means_no_reward(offline):
    assert offline.calculate_offline_rewards(7200) == 0


def test_apply_adds_points_and_emits(offline, state, bus):
    state.points_per_second = 10
    rec = Recorder(bus, OfflineRewardsApplied)

    assert offline.calculate_and_apply_offline_rewards(7200) == 36_000

    assert state.current_points == 36_000
    assert rec.events == [OfflineRewardsApplied(36_000, 7200)]


def test_apply_zero_reward_emits_nothing(offline, bus):
    rec = Recorder(bus, OfflineRewardsApplied)
    assert offline.calculate_and_apply_offline_rewards(30) == 0
    assert rec.events == []


def test_prestige_offline_bonus_is_applied(offline, prestige, state):
    state.prestige.current_prestige_points = 2
    prestige.purchase_prestige_upgrade("offline")
    prestige.purchase_prestige_upgrade("offline")
    # purchases rebuild rates from upgrades, so set production afterwards
    state.points_per_second = 10
    assert offline.offline_bonus() == pytest.approx(1.3)
    assert offline.calculate_offline_rewards(7200) == 46_800


def test_without_prestige_bonus_is_one(points, bus):
    engine = OfflineRewardsEngine(points, bus)
    assert engine.offline_bonus() == 1.0


def test_setters_clamp(offline):
    offline.set_max_offline_hours(0.25)
    assert offline.max_offline_hours == 1.0
    offline.set_offline_efficiency(1.5)
    assert offline.offline_efficiency == 1.0
    offline.set_offline_efficiency(-0.2)
    assert offline.offline_efficiency == 0.0


def test_constructor_clamps_settings(points, bus):
    engine = OfflineRewardsEngine(points, bus, max_offline_hours=0, offline_efficiency=3)
    assert engine.max_offline_hours == 1.0
    assert engine.offline_efficiency == 1.0


@pytest.mark.parametrize(
    "seconds, expected",
    [(45, "45s"), (300, "5m"), (7200, "2.0h"), (129_600, "1.5d")],
)
def test_format_offline_time(seconds, expected):
    assert OfflineRewardsEngine.format_offline_time(seconds) == expected
