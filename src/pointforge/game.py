from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .definitions.catalog import DefinitionCatalog
from .engines import AchievementEngine, OfflineRewardsEngine, PointEngine, PrestigeEngine, UpgradeEngine
from .errors import PointForgeError
from .events import EventBus
from .persistence.gateway import PersistenceGateway
from .persistence.paths import default_save_root
from .persistence.storage import FileStorage, Storage
from .scheduler import TickScheduler
from .settings import Settings
from .state.models import PlayerState, utcnow

logger = logging.getLogger(__name__)


class GameSession:
    """Composition root: builds every engine around one PlayerState and drives them.

    The host calls ``start()`` once, then either ``tick(dt)`` at a fixed 1 Hz
    cadence or ``update(frame_dt)`` every frame, and forwards lifecycle
    transitions (focus, pause, quit). Presentation code subscribes to
    ``event_bus``, which outlives state swaps caused by ``reset()``.
    """

    def __init__(
        self,
        catalog: Optional[DefinitionCatalog] = None,
        settings: Optional[Settings] = None,
        storage: Optional[Storage] = None,
        clock: Callable[[], datetime] = utcnow,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.catalog = catalog or DefinitionCatalog.default()
        self.settings = settings or Settings()
        self.clock = clock
        self.event_bus = event_bus or EventBus()
        if storage is None:
            save_dir = self.settings.persistence.save_dir
            storage = FileStorage(Path(save_dir) if save_dir else default_save_root())
        self.storage = storage
        self.gateway = PersistenceGateway(
            storage,
            self.event_bus,
            clock=clock,
            key=self.settings.persistence.save_key,
            auto_save_interval=self.settings.persistence.auto_save_interval,
            offline_rewards=self._wire,
        )
        self.scheduler = TickScheduler(
            self.tick,
            interval=self.settings.gameplay.tick_interval,
            max_catch_up=self.settings.gameplay.max_catch_up_ticks,
        )

        self.state: Optional[PlayerState] = None
        self.points: Optional[PointEngine] = None
        self.upgrades: Optional[UpgradeEngine] = None
        self.achievements: Optional[AchievementEngine] = None
        self.prestige: Optional[PrestigeEngine] = None
        self.offline: Optional[OfflineRewardsEngine] = None
        self._started = False
        self._paused = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def paused(self) -> bool:
        return self._paused

    # Wiring

    def _wire(self, state: PlayerState) -> OfflineRewardsEngine:
        """Build the engine graph for ``state``; reuses it if already built."""
        if self.state is state and self.offline is not None:
            return self.offline
        self._unwire()
        gameplay = self.settings.gameplay
        offline = self.settings.offline
        self.state = state
        self.points = PointEngine(state, self.catalog, self.event_bus)
        self.upgrades = UpgradeEngine(state, self.catalog, self.points, self.event_bus)
        self.achievements = AchievementEngine(state, self.catalog, self.points, self.event_bus, clock=self.clock)
        self.prestige = PrestigeEngine(
            state,
            self.catalog,
            self.points,
            self.upgrades,
            self.event_bus,
            save_hook=self.gateway.save,
            clock=self.clock,
            min_prestige_points=gameplay.min_prestige_points,
        )
        self.offline = OfflineRewardsEngine(
            self.points,
            self.event_bus,
            prestige=self.prestige,
            max_offline_hours=offline.max_offline_hours,
            offline_efficiency=offline.offline_efficiency,
        )
        logger.debug("Engines wired for state (points=%s)", state.current_points)
        return self.offline

    def _unwire(self) -> None:
        if self.achievements is not None:
            self.achievements.detach()
        if self.prestige is not None:
            self.prestige.detach()

    def _settle(self) -> None:
        assert self.upgrades is not None and self.prestige is not None and self.points is not None
        self.upgrades.recalculate_all_effects()
        self.prestige.recalculate_prestige_effects()
        self.points.broadcast()

    def _require_started(self) -> None:
        if not self._started:
            raise PointForgeError("GameSession.start() must be called first")

    # Lifecycle

    def start(self) -> PlayerState:
        if self._started:
            assert self.state is not None
            return self.state
        state = self.gateway.load()
        if state is None:
            state = PlayerState(play_start_time=self.clock())
        self._wire(state)
        self._settle()
        self.gateway.enable_auto_save()
        self.scheduler.start()
        self._started = True
        self._paused = False
        logger.info("Game session started (points=%s)", state.current_points)
        return state

    def tick(self, dt: float = 1.0) -> None:
        """One fixed-cadence step: idle generation, play time, autosave."""
        if not self._started or self._paused:
            return
        assert self.points is not None and self.achievements is not None and self.state is not None
        self.points.tick(dt)
        self.achievements.update_play_time()
        self.gateway.tick(self.state, dt)

    def update(self, frame_dt: float) -> int:
        """Frame-driven entry point; forwards to the tick scheduler."""
        return self.scheduler.update(frame_dt)

    def pause(self) -> None:
        if not self._started or self._paused:
            return
        self._paused = True
        self.scheduler.stop()
        self.gateway.disable_auto_save()
        self.save()
        logger.info("Game paused")

    def resume(self) -> None:
        if not self._started or not self._paused:
            return
        self._paused = False
        self.gateway.enable_auto_save()
        self.scheduler.start()
        logger.info("Game resumed")

    def on_focus_changed(self, has_focus: bool) -> None:
        if has_focus:
            self.resume()
        else:
            self.pause()

    def on_pause_changed(self, paused: bool) -> None:
        if paused:
            self.pause()
        else:
            self.resume()

    def quit(self) -> None:
        if not self._started:
            return
        self.scheduler.stop()
        self.save()
        logger.info("Game session closed")

    def save(self) -> bool:
        if self.state is None:
            return False
        return self.gateway.save(self.state)

    def reset(self) -> PlayerState:
        """Delete the save and continue with a fresh default state."""
        self._require_started()
        self.gateway.delete_save()
        state = PlayerState(play_start_time=self.clock())
        self._wire(state)
        self._settle()
        logger.info("Progress reset")
        return state

    # Player actions

    def click(self) -> None:
        self._require_started()
        assert self.points is not None
        self.points.perform_click()

    def purchase_upgrade(self, upgrade_id: str) -> bool:
        self._require_started()
        assert self.upgrades is not None
        return self.upgrades.purchase(upgrade_id)

    def perform_prestige(self) -> int:
        self._require_started()
        assert self.prestige is not None
        return self.prestige.perform_prestige()

    def purchase_prestige_upgrade(self, upgrade_id: str) -> bool:
        self._require_started()
        assert self.prestige is not None
        return self.prestige.purchase_prestige_upgrade(upgrade_id)
