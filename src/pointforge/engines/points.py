import logging
from typing import Optional

from ..constants import INITIAL_POINTS_PER_CLICK, INITIAL_POINTS_PER_SECOND, MAX_POINTS
from ..definitions.catalog import DefinitionCatalog
from ..errors import require
from ..events import Clicked, EventBus, PointsChanged, PointsPerClickChanged, PointsPerSecondChanged
from ..state.models import PlayerState

logger = logging.getLogger(__name__)


class PointEngine:
    """Owns the point balance and production rates of a PlayerState.

    Every other engine adds, spends or re-rates points through this class,
    and it emits a change event after each mutation.
    """

    def __init__(self, state: Optional[PlayerState], catalog: Optional[DefinitionCatalog], event_bus: Optional[EventBus]) -> None:
        self.state = require(state, "state", "PointEngine")
        self.catalog = require(catalog, "catalog", "PointEngine")
        self.event_bus = require(event_bus, "event_bus", "PointEngine")
        self._idle_carry = 0.0

    @property
    def current_points(self) -> int:
        return self.state.current_points

    @property
    def points_per_click(self) -> int:
        return self.state.points_per_click

    @property
    def points_per_second(self) -> int:
        return self.state.points_per_second

    def add_points(self, amount: int) -> None:
        if amount <= 0:
            return
        self.state.current_points = min(MAX_POINTS, self.state.current_points + amount)
        logger.debug("Points added: +%s; current=%s", amount, self.state.current_points)
        self.event_bus.emit(PointsChanged(self.state.current_points))

    def spend_points(self, amount: int) -> bool:
        """Deduct ``amount`` if affordable. Returns False and leaves state untouched otherwise."""
        if amount <= 0 or self.state.current_points < amount:
            logger.debug("Cannot spend %s points; have %s", amount, self.state.current_points)
            return False
        self.state.current_points -= amount
        logger.debug("Points spent: -%s; current=%s", amount, self.state.current_points)
        self.event_bus.emit(PointsChanged(self.state.current_points))
        return True

    def increase_points_per_click(self, amount: int) -> None:
        if amount <= 0:
            return
        self.state.points_per_click = min(MAX_POINTS, self.state.points_per_click + amount)
        logger.debug("Points per click +%s; now %s", amount, self.state.points_per_click)
        self.event_bus.emit(PointsPerClickChanged(self.state.points_per_click))

    def increase_points_per_second(self, amount: int) -> None:
        if amount <= 0:
            return
        self.state.points_per_second = min(MAX_POINTS, self.state.points_per_second + amount)
        logger.debug("Points per second +%s; now %s", amount, self.state.points_per_second)
        self.event_bus.emit(PointsPerSecondChanged(self.state.points_per_second))

    def perform_click(self) -> None:
        self.add_points(self.state.points_per_click)
        self.state.total_clicks += 1
        self.event_bus.emit(Clicked(self.state.total_clicks))

    def tick(self, dt: float = 1.0) -> None:
        """Advance play time by ``dt`` and pay ``points_per_second`` once per whole second elapsed.

        Fractional seconds carry over, so idle income does not depend on the
        tick cadence.
        """
        if dt <= 0:
            return
        self.state.total_play_time_seconds += dt
        self._idle_carry += dt
        whole_seconds = int(self._idle_carry + 1e-9)
        if whole_seconds <= 0:
            return
        self._idle_carry = max(0.0, self._idle_carry - whole_seconds)
        if self.state.points_per_second > 0:
            self.add_points(self.state.points_per_second * whole_seconds)

    def recalculate_stats(self) -> None:
        """Rebuild both rates from baseline and owned upgrade levels.

        Deterministic and idempotent; must follow any bulk change to
        upgrade levels or prestige state.
        """
        per_click = INITIAL_POINTS_PER_CLICK
        per_second = INITIAL_POINTS_PER_SECOND
        for definition in self.catalog.upgrades:
            level = self.state.upgrade_level(definition.id)
            if level > 0:
                per_click += definition.per_click_effect * level
                per_second += definition.per_second_effect * level
        self.state.points_per_click = min(MAX_POINTS, per_click)
        self.state.points_per_second = min(MAX_POINTS, per_second)
        self.event_bus.emit(PointsPerClickChanged(self.state.points_per_click))
        self.event_bus.emit(PointsPerSecondChanged(self.state.points_per_second))
        logger.debug(
            "Stats recalculated: per_click=%s per_second=%s",
            self.state.points_per_click,
            self.state.points_per_second,
        )

    def broadcast(self) -> None:
        """Re-emit current values so freshly attached listeners can sync."""
        self.event_bus.emit(PointsChanged(self.state.current_points))
        self.event_bus.emit(PointsPerClickChanged(self.state.points_per_click))
        self.event_bus.emit(PointsPerSecondChanged(self.state.points_per_second))
