import logging
import math
from datetime import datetime
from fractions import Fraction
from typing import Callable, List, Optional

from ..constants import MAX_COST, MIN_PRESTIGE_POINTS, PRESTIGE_LEVEL_BONUS, PRESTIGE_POINT_RATIO
from ..definitions.catalog import DefinitionCatalog
from ..definitions.models import PrestigeUpgradeDefinition, PrestigeUpgradeType
from ..errors import require
from ..events import (
    EventBus,
    PointsChanged,
    PrestigeAvailabilityChanged,
    PrestigePerformed,
    PrestigePointsChanged,
)
from ..state.models import PlayerState, PrestigeState, utcnow
from .points import PointEngine
from .upgrades import UpgradeEngine

logger = logging.getLogger(__name__)

SaveHook = Callable[[PlayerState], None]


class PrestigeEngine:
    """Soft-reset cycle and the permanent prestige upgrade tree.

    Only two prestige upgrade types have an effect path: GLOBAL_MULTIPLIER
    feeds ``global_multiplier`` and OFFLINE_BONUS feeds ``offline_bonus()``.
    The remaining types are purchasable catalog entries without an effect.
    """

    def __init__(
        self,
        state: Optional[PlayerState],
        catalog: Optional[DefinitionCatalog],
        points: Optional[PointEngine],
        upgrades: Optional[UpgradeEngine],
        event_bus: Optional[EventBus],
        save_hook: Optional[SaveHook] = None,
        clock: Callable[[], datetime] = utcnow,
        min_prestige_points: int = MIN_PRESTIGE_POINTS,
    ) -> None:
        self.state = require(state, "state", "PrestigeEngine")
        self.catalog = require(catalog, "catalog", "PrestigeEngine")
        self.points = require(points, "points", "PrestigeEngine")
        self.upgrades = require(upgrades, "upgrades", "PrestigeEngine")
        self.event_bus = require(event_bus, "event_bus", "PrestigeEngine")
        self.save_hook = save_hook
        self.clock = clock
        self.min_prestige_points = min_prestige_points
        self._available = self.can_prestige()
        self._attached = False
        self.attach()

    @property
    def data(self) -> PrestigeState:
        return self.state.prestige

    @property
    def global_multiplier(self) -> float:
        return self.data.global_multiplier

    def attach(self) -> None:
        if not self._attached:
            self.event_bus.subscribe(PointsChanged, self._on_points_changed)
            self._attached = True

    def detach(self) -> None:
        if self._attached:
            self.event_bus.unsubscribe(PointsChanged, self._on_points_changed)
            self._attached = False

    def _on_points_changed(self, event: PointsChanged) -> None:
        available = self.can_prestige()
        if available != self._available:
            self._available = available
            self.event_bus.emit(PrestigeAvailabilityChanged(available))

    # Prestige cycle

    def can_prestige(self) -> bool:
        return self.state.current_points >= self.min_prestige_points

    def calculate_prestige_points(self) -> int:
        """``floor(points * ratio * (1 + level * bonus))``, or 0 when not eligible."""
        if not self.can_prestige():
            return 0
        ratio = Fraction(str(PRESTIGE_POINT_RATIO))
        level_bonus = 1 + self.data.level * Fraction(str(PRESTIGE_LEVEL_BONUS))
        return math.floor(self.state.current_points * ratio * level_bonus)

    def perform_prestige(self) -> int:
        """Reset the run in exchange for prestige points. Returns the points gained."""
        if not self.can_prestige():
            logger.warning(
                "Prestige not available: %s points, need %s", self.state.current_points, self.min_prestige_points
            )
            return 0

        gained = self.calculate_prestige_points()
        data = self.data
        data.level += 1
        data.total_prestige_points += gained
        data.current_prestige_points += gained
        data.last_prestige_time = self.clock()

        self._reset_run()
        self.recalculate_prestige_effects()

        if self.save_hook is not None:
            self.save_hook(self.state)

        logger.info("Prestige performed: level=%s gained=%s", data.level, gained)
        self.event_bus.emit(PrestigePerformed(gained, data.level))
        self.event_bus.emit(PrestigePointsChanged(data.current_prestige_points))
        return gained

    def _reset_run(self) -> None:
        self.state.current_points = 0
        self.state.upgrade_levels.clear()
        self.points.recalculate_stats()
        self.upgrades.recalculate_all_effects()
        self.event_bus.emit(PointsChanged(self.state.current_points))

    # Prestige upgrades

    def all_definitions(self) -> List[PrestigeUpgradeDefinition]:
        return self.catalog.prestige_upgrades

    def prestige_upgrade_level(self, upgrade_id: str) -> int:
        return self.data.upgrade_levels.get(upgrade_id, 0)

    def prestige_upgrade_cost(self, upgrade_id: str) -> int:
        definition = self.catalog.prestige_upgrade(upgrade_id)
        if definition is None:
            return MAX_COST
        return definition.cost_at(self.prestige_upgrade_level(upgrade_id))

    def can_afford_prestige_upgrade(self, upgrade_id: str) -> bool:
        return self.data.current_prestige_points >= self.prestige_upgrade_cost(upgrade_id)

    def purchase_prestige_upgrade(self, upgrade_id: str) -> bool:
        definition = self.catalog.prestige_upgrade(upgrade_id)
        if definition is None:
            logger.warning("Purchase of unknown prestige upgrade: %s", upgrade_id)
            return False

        level = self.prestige_upgrade_level(upgrade_id)
        cost = definition.cost_at(level)
        if self.data.current_prestige_points < cost:
            logger.debug("Insufficient prestige points for %s: cost=%s", upgrade_id, cost)
            return False
        if level >= definition.max_level:
            logger.debug("Prestige upgrade %s at max level %s", upgrade_id, definition.max_level)
            return False

        self.data.current_prestige_points -= cost
        self.data.upgrade_levels[upgrade_id] = level + 1
        self.recalculate_prestige_effects()
        self.points.recalculate_stats()

        logger.info("Prestige upgrade purchased: %s Lv.%s for %s", upgrade_id, level + 1, cost)
        self.event_bus.emit(PrestigePointsChanged(self.data.current_prestige_points))
        return True

    def recalculate_prestige_effects(self) -> None:
        multiplier = 1.0
        for definition in self.catalog.prestige_upgrades:
            level = self.prestige_upgrade_level(definition.id)
            if level > 0 and definition.upgrade_type is PrestigeUpgradeType.GLOBAL_MULTIPLIER:
                multiplier += level * definition.base_effect_value
        self.data.global_multiplier = max(1.0, multiplier)
        logger.debug("Prestige effects recalculated: global multiplier %.2fx", self.data.global_multiplier)

    def offline_bonus(self) -> float:
        bonus = 1.0
        for definition in self.catalog.prestige_upgrades:
            level = self.prestige_upgrade_level(definition.id)
            if level > 0 and definition.upgrade_type is PrestigeUpgradeType.OFFLINE_BONUS:
                bonus += level * definition.effect_at(level)
        return bonus
