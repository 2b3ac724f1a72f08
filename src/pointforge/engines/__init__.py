"""Progression engines. PointEngine is the hub the others call into."""

from .achievements import AchievementEngine
from .offline import OfflineRewardsEngine
from .points import PointEngine
from .prestige import PrestigeEngine
from .upgrades import UpgradeEngine

__all__ = [
    "AchievementEngine",
    "OfflineRewardsEngine",
    "PointEngine",
    "PrestigeEngine",
    "UpgradeEngine",
]
