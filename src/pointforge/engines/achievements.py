import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..definitions.catalog import DefinitionCatalog
from ..definitions.models import AchievementDefinition, AchievementType
from ..errors import require
from ..events import (
    AchievementProgressChanged,
    AchievementUnlocked,
    Clicked,
    EventBus,
    PointsChanged,
    PointsPerClickChanged,
    PointsPerSecondChanged,
    PrestigePerformed,
    UpgradePurchased,
)
from ..state.models import AchievementProgress, PlayerState, utcnow
from .points import PointEngine

logger = logging.getLogger(__name__)


class AchievementEngine:
    """Tracks progress against achievement definitions and grants rewards.

    Progress is driven by the point engine's events, so an achievement is
    unlocked (and its reward paid) inside the same call that crossed its
    target.

    ``update_progress`` overwrites the stored progress with the reported
    value rather than keeping a running maximum, so progress of a locked
    achievement can go down when a lower value of the same type is reported.
    """

    def __init__(
        self,
        state: Optional[PlayerState],
        catalog: Optional[DefinitionCatalog],
        points: Optional[PointEngine],
        event_bus: Optional[EventBus],
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.state = require(state, "state", "AchievementEngine")
        self.catalog = require(catalog, "catalog", "AchievementEngine")
        self.points = require(points, "points", "AchievementEngine")
        self.event_bus = require(event_bus, "event_bus", "AchievementEngine")
        self.clock = clock
        for definition in self.catalog.achievements:
            self.state.achievement(definition.id)
        self._attached = False
        self.attach()

    def attach(self) -> None:
        if self._attached:
            return
        self.event_bus.subscribe(PointsChanged, self._on_points_changed)
        self.event_bus.subscribe(Clicked, self._on_clicked)
        self.event_bus.subscribe(PointsPerClickChanged, self._on_per_click_changed)
        self.event_bus.subscribe(PointsPerSecondChanged, self._on_per_second_changed)
        self.event_bus.subscribe(UpgradePurchased, self._on_upgrade_purchased)
        self.event_bus.subscribe(PrestigePerformed, self._on_prestige_performed)
        self._attached = True
        logger.debug("AchievementEngine attached (%d definitions)", self.total_count())

    def detach(self) -> None:
        if not self._attached:
            return
        self.event_bus.unsubscribe(PointsChanged, self._on_points_changed)
        self.event_bus.unsubscribe(Clicked, self._on_clicked)
        self.event_bus.unsubscribe(PointsPerClickChanged, self._on_per_click_changed)
        self.event_bus.unsubscribe(PointsPerSecondChanged, self._on_per_second_changed)
        self.event_bus.unsubscribe(UpgradePurchased, self._on_upgrade_purchased)
        self.event_bus.unsubscribe(PrestigePerformed, self._on_prestige_performed)
        self._attached = False

    # Event handlers

    def _on_points_changed(self, event: PointsChanged) -> None:
        self.update_progress(AchievementType.TOTAL_POINTS, event.current)

    def _on_clicked(self, event: Clicked) -> None:
        self.update_progress(AchievementType.TOTAL_CLICKS, self.state.total_clicks)

    def _on_per_click_changed(self, event: PointsPerClickChanged) -> None:
        self.update_progress(AchievementType.POINTS_PER_CLICK, event.points_per_click)

    def _on_per_second_changed(self, event: PointsPerSecondChanged) -> None:
        self.update_progress(AchievementType.POINTS_PER_SECOND, event.points_per_second)

    def _on_upgrade_purchased(self, event: UpgradePurchased) -> None:
        self.update_progress(AchievementType.UPGRADE_COUNT, self.state.total_upgrades_purchased)
        self.update_progress(AchievementType.MAX_UPGRADE_LEVEL, max(self.state.upgrade_levels.values(), default=0))

    def _on_prestige_performed(self, event: PrestigePerformed) -> None:
        self.update_progress(AchievementType.REACH_LEVEL, event.new_level)

    # Commands

    def update_progress(self, achievement_type: AchievementType, value: int) -> None:
        for definition in self.catalog.achievements:
            if definition.type != achievement_type or self.is_unlocked(definition.id):
                continue
            record = self.state.achievement(definition.id)
            record.progress = value
            self.event_bus.emit(AchievementProgressChanged(definition.id, value, definition.target_value))
            if value >= definition.target_value:
                self.unlock(definition.id)

    def update_play_time(self) -> None:
        self.update_progress(AchievementType.TIME_SPENT, int(self.state.total_play_time_seconds))

    def unlock(self, achievement_id: str) -> None:
        definition = self.catalog.achievement(achievement_id)
        if definition is None:
            logger.warning("Unlock requested for unknown achievement: %s", achievement_id)
            return
        record = self.state.achievement(achievement_id)
        if record.unlocked:
            return
        record.unlocked = True
        record.unlocked_at = self.clock()
        self._apply_rewards(definition)
        logger.info("Achievement unlocked: %s", achievement_id)
        self.event_bus.emit(AchievementUnlocked(definition))

    def _apply_rewards(self, definition: AchievementDefinition) -> None:
        if definition.reward_points > 0:
            self.points.add_points(definition.reward_points)
        if definition.reward_click_bonus > 0:
            self.points.increase_points_per_click(definition.reward_click_bonus)
        if definition.reward_idle_bonus > 0:
            self.points.increase_points_per_second(definition.reward_idle_bonus)

    # Queries

    def is_unlocked(self, achievement_id: str) -> bool:
        record = self.state.achievements.get(achievement_id)
        return record is not None and record.unlocked

    def user_achievement(self, achievement_id: str) -> Optional[AchievementProgress]:
        return self.state.achievements.get(achievement_id)

    def unlocked_count(self) -> int:
        return sum(1 for d in self.catalog.achievements if self.is_unlocked(d.id))

    def total_count(self) -> int:
        return len(self.catalog.achievements)

    def all_definitions(self) -> List[AchievementDefinition]:
        return self.catalog.achievements

    def visible_definitions(self) -> List[AchievementDefinition]:
        """All definitions except hidden ones the player has not unlocked yet."""
        return [d for d in self.catalog.achievements if not d.is_hidden or self.is_unlocked(d.id)]
