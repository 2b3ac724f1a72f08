import logging
import math
from typing import Optional

from ..constants import DEFAULT_MAX_OFFLINE_HOURS, DEFAULT_OFFLINE_EFFICIENCY, MIN_OFFLINE_SECONDS
from ..errors import require
from ..events import EventBus, OfflineRewardsApplied
from .points import PointEngine
from .prestige import PrestigeEngine

logger = logging.getLogger(__name__)


class OfflineRewardsEngine:
    """Converts time spent away into a one-time, capped and discounted grant."""

    def __init__(
        self,
        points: Optional[PointEngine],
        event_bus: Optional[EventBus],
        prestige: Optional[PrestigeEngine] = None,
        max_offline_hours: float = DEFAULT_MAX_OFFLINE_HOURS,
        offline_efficiency: float = DEFAULT_OFFLINE_EFFICIENCY,
    ) -> None:
        self.points = require(points, "points", "OfflineRewardsEngine")
        self.event_bus = require(event_bus, "event_bus", "OfflineRewardsEngine")
        self.prestige = prestige
        self.max_offline_hours = DEFAULT_MAX_OFFLINE_HOURS
        self.offline_efficiency = DEFAULT_OFFLINE_EFFICIENCY
        self.set_max_offline_hours(max_offline_hours)
        self.set_offline_efficiency(offline_efficiency)

    def offline_bonus(self) -> float:
        return self.prestige.offline_bonus() if self.prestige is not None else 1.0

    def calculate_offline_rewards(self, elapsed_seconds: float) -> int:
        if elapsed_seconds < MIN_OFFLINE_SECONDS:
            return 0
        effective_seconds = min(elapsed_seconds, self.max_offline_hours * 3600)
        reward = self.points.points_per_second * self.offline_efficiency * self.offline_bonus() * effective_seconds
        return max(0, math.floor(reward))

    def calculate_and_apply_offline_rewards(self, elapsed_seconds: float) -> int:
        reward = self.calculate_offline_rewards(elapsed_seconds)
        if reward > 0:
            self.points.add_points(reward)
            logger.info("Offline rewards applied: %s points for %.0fs away", reward, elapsed_seconds)
            self.event_bus.emit(OfflineRewardsApplied(reward, elapsed_seconds))
        return reward

    def set_max_offline_hours(self, hours: float) -> None:
        self.max_offline_hours = max(1.0, float(hours))
        logger.debug("Max offline hours set to %s", self.max_offline_hours)

    def set_offline_efficiency(self, efficiency: float) -> None:
        self.offline_efficiency = min(1.0, max(0.0, float(efficiency)))
        logger.debug("Offline efficiency set to %.0f%%", self.offline_efficiency * 100)

    @staticmethod
    def format_offline_time(seconds: float) -> str:
        if seconds < 60:
            return f"{seconds:.0f}s"
        if seconds < 3600:
            return f"{seconds / 60:.0f}m"
        if seconds < 86400:
            return f"{seconds / 3600:.1f}h"
        return f"{seconds / 86400:.1f}d"
