import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from pointforge.definitions import (  # noqa: E402
    AchievementDefinition,
    AchievementType,
    DefinitionCatalog,
    PrestigeUpgradeDefinition,
    PrestigeUpgradeType,
    UpgradeDefinition,
)
from pointforge.engines import (  # noqa: E402
    AchievementEngine,
    OfflineRewardsEngine,
    PointEngine,
    PrestigeEngine,
    UpgradeEngine,
)
from pointforge.events import EventBus  # noqa: E402
from pointforge.state import PlayerState  # noqa: E402


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class Recorder:
    """Collects every event of the given types emitted on a bus."""

    def __init__(self, bus, *event_types):
        self.events = []
        for event_type in event_types:
            bus.subscribe(event_type, self.events.append)

    def of(self, event_type):
        return [e for e in self.events if isinstance(e, event_type)]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def catalog():
    """Small catalog with reward-free achievements so point math stays exact."""
    return DefinitionCatalog(
        upgrades=[
            UpgradeDefinition(id="finger", base_cost=10, cost_multiplier=1.15, per_click_effect=1),
            UpgradeDefinition(id="tapper", base_cost=50, cost_multiplier=1.15, per_second_effect=1),
            UpgradeDefinition(id="capped", base_cost=5, cost_multiplier=2.0, per_click_effect=2, max_level=2),
        ],
        achievements=[
            AchievementDefinition(id="clicks_100", type=AchievementType.TOTAL_CLICKS, target_value=100),
            AchievementDefinition(id="points_1000", type=AchievementType.TOTAL_POINTS, target_value=1000),
            AchievementDefinition(id="one_upgrade", type=AchievementType.UPGRADE_COUNT, target_value=1),
            AchievementDefinition(id="prestige_1", type=AchievementType.REACH_LEVEL, target_value=1),
            AchievementDefinition(
                id="hidden_minute", type=AchievementType.TIME_SPENT, target_value=60, is_hidden=True
            ),
        ],
        prestige_upgrades=[
            PrestigeUpgradeDefinition(
                id="global",
                base_cost=1,
                cost_multiplier=2.0,
                base_effect_value=0.1,
                effect_increment_per_level=0.0,
                upgrade_type=PrestigeUpgradeType.GLOBAL_MULTIPLIER,
                max_level=3,
            ),
            PrestigeUpgradeDefinition(
                id="offline",
                base_cost=1,
                cost_multiplier=1.0,
                base_effect_value=0.1,
                effect_increment_per_level=0.05,
                upgrade_type=PrestigeUpgradeType.OFFLINE_BONUS,
                max_level=5,
            ),
            PrestigeUpgradeDefinition(
                id="clicky",
                base_cost=1,
                cost_multiplier=1.0,
                base_effect_value=0.2,
                upgrade_type=PrestigeUpgradeType.CLICK_MULTIPLIER,
                max_level=5,
            ),
        ],
    )


@pytest.fixture
def state(clock):
    return PlayerState(play_start_time=clock())


@pytest.fixture
def points(state, catalog, bus):
    return PointEngine(state, catalog, bus)


@pytest.fixture
def upgrades(state, catalog, points, bus):
    return UpgradeEngine(state, catalog, points, bus)


@pytest.fixture
def achievements(state, catalog, points, bus, clock):
    return AchievementEngine(state, catalog, points, bus, clock=clock)


@pytest.fixture
def prestige(state, catalog, points, upgrades, bus, clock):
    return PrestigeEngine(state, catalog, points, upgrades, bus, clock=clock)


@pytest.fixture
def offline(points, bus, prestige):
    return OfflineRewardsEngine(points, bus, prestige=prestige)
