import logging
from typing import List, Optional

from ..constants import MAX_COST
from ..definitions.catalog import DefinitionCatalog
from ..definitions.models import UpgradeDefinition
from ..errors import require
from ..events import EventBus, UpgradePurchased, UpgradePurchaseFailed
from ..state.models import PlayerState
from .points import PointEngine

logger = logging.getLogger(__name__)


class UpgradeEngine:
    """Purchase flow and level bookkeeping for production upgrades."""

    def __init__(
        self,
        state: Optional[PlayerState],
        catalog: Optional[DefinitionCatalog],
        points: Optional[PointEngine],
        event_bus: Optional[EventBus],
    ) -> None:
        self.state = require(state, "state", "UpgradeEngine")
        self.catalog = require(catalog, "catalog", "UpgradeEngine")
        self.points = require(points, "points", "UpgradeEngine")
        self.event_bus = require(event_bus, "event_bus", "UpgradeEngine")

    def definition(self, upgrade_id: str) -> Optional[UpgradeDefinition]:
        return self.catalog.upgrade(upgrade_id)

    def all_definitions(self) -> List[UpgradeDefinition]:
        return self.catalog.upgrades

    def level(self, upgrade_id: str) -> int:
        return self.state.upgrade_level(upgrade_id)

    def current_cost(self, upgrade_id: str) -> int:
        """Price of the next level, or MAX_COST for an unknown id."""
        definition = self.definition(upgrade_id)
        if definition is None:
            logger.warning("Cost lookup for unknown upgrade: %s", upgrade_id)
            return MAX_COST
        return definition.cost_at(self.level(upgrade_id))

    def can_purchase(self, upgrade_id: str) -> bool:
        definition = self.definition(upgrade_id)
        if definition is None:
            return False
        level = self.level(upgrade_id)
        if definition.is_maxed(level):
            return False
        return self.points.current_points >= definition.cost_at(level)

    def purchase(self, upgrade_id: str) -> bool:
        definition = self.definition(upgrade_id)
        if definition is None:
            logger.warning("Purchase of unknown upgrade: %s", upgrade_id)
            self.event_bus.emit(UpgradePurchaseFailed(upgrade_id, "unknown"))
            return False

        current_level = self.level(upgrade_id)
        if definition.is_maxed(current_level):
            logger.debug("Upgrade %s already at max level %s", upgrade_id, definition.max_level)
            self.event_bus.emit(UpgradePurchaseFailed(upgrade_id, "max_level"))
            return False

        cost = definition.cost_at(current_level)
        if not self.points.spend_points(cost):
            logger.debug("Insufficient points for %s: cost=%s have=%s", upgrade_id, cost, self.points.current_points)
            self.event_bus.emit(UpgradePurchaseFailed(upgrade_id, "insufficient_points"))
            return False

        new_level = current_level + 1
        self.state.upgrade_levels[upgrade_id] = new_level
        self.state.total_upgrades_purchased += 1
        # Incremental on purchase; bulk changes go through recalculate_all_effects()
        self.points.increase_points_per_click(definition.per_click_effect)
        self.points.increase_points_per_second(definition.per_second_effect)

        logger.info("Upgrade purchased: %s Lv.%s for %s", upgrade_id, new_level, cost)
        self.event_bus.emit(UpgradePurchased(upgrade_id, new_level))
        return True

    def total_invested_cost(self, upgrade_id: str) -> int:
        definition = self.definition(upgrade_id)
        if definition is None:
            return 0
        return sum(definition.cost_at(i) for i in range(self.level(upgrade_id)))

    def affordable_upgrades(self) -> List[str]:
        return [d.id for d in self.all_definitions() if self.can_purchase(d.id)]

    def highest_level(self) -> int:
        return max(self.state.upgrade_levels.values(), default=0)

    def recalculate_all_effects(self) -> None:
        self.points.recalculate_stats()
