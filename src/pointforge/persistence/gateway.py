from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional

from ..constants import AUTO_SAVE_INTERVAL, MIN_OFFLINE_SECONDS, SAVE_DATA_KEY
from ..errors import SaveError, require
from ..events import EventBus, LoadCompleted, SaveCompleted
from ..state.models import PlayerState, format_timestamp, utcnow
from .codec import decode_envelope, encode_envelope
from .storage import Storage

if TYPE_CHECKING:
    from ..engines.offline import OfflineRewardsEngine

logger = logging.getLogger(__name__)

OfflineRewardsFactory = Callable[[PlayerState], "OfflineRewardsEngine"]


class PersistenceGateway:
    """Saves and restores PlayerState through a key/value Storage backend.

    Save failures are logged and swallowed; a missing or unreadable save
    loads as ``None`` so the caller starts a fresh game.

    ``offline_rewards`` builds (or returns) the offline rewards engine bound
    to a freshly loaded state, so catch-up points land in that state before
    ``load`` returns it.
    """

    def __init__(
        self,
        storage: Optional[Storage],
        event_bus: Optional[EventBus],
        clock: Callable[[], datetime] = utcnow,
        key: str = SAVE_DATA_KEY,
        auto_save_interval: float = AUTO_SAVE_INTERVAL,
        offline_rewards: Optional[OfflineRewardsFactory] = None,
    ) -> None:
        self.storage = require(storage, "storage", "PersistenceGateway")
        self.event_bus = require(event_bus, "event_bus", "PersistenceGateway")
        self.clock = clock
        self.key = key
        self.auto_save_interval = max(0.0, float(auto_save_interval))
        self.offline_rewards = offline_rewards
        self.auto_save_enabled = True
        self._since_last_save = 0.0
        self.last_offline_seconds = 0.0

    def save(self, state: PlayerState) -> bool:
        """Persist ``state``. Returns False (and logs) on failure instead of raising."""
        saved_at = self.clock()
        try:
            self.storage.write(self.key, encode_envelope(state, saved_at))
        except Exception as e:  # noqa: BLE001 - persistence must never break game logic
            logger.exception("Failed to save player state: %s", e)
            return False
        self._since_last_save = 0.0
        logger.info("Player state saved (points=%s)", state.current_points)
        self.event_bus.emit(SaveCompleted(format_timestamp(saved_at) or ""))
        return True

    def load(self) -> Optional[PlayerState]:
        try:
            text = self.storage.read(self.key)
            if text is None:
                logger.info("No save data found; a new game will start")
                return None
            state, saved_at = decode_envelope(text)
        except (OSError, SaveError) as e:
            logger.error("Save data is corrupt or unreadable: %s", e)
            recovered = self._load_backup()
            if recovered is None:
                return None
            state, saved_at = recovered

        offline_seconds = max(0.0, (self.clock() - saved_at).total_seconds())
        self.last_offline_seconds = offline_seconds
        logger.info("Loaded player state (points=%s, offline=%.0fs)", state.current_points, offline_seconds)
        if offline_seconds >= MIN_OFFLINE_SECONDS and self.offline_rewards is not None:
            self.offline_rewards(state).calculate_and_apply_offline_rewards(offline_seconds)

        self._since_last_save = 0.0
        self.event_bus.emit(LoadCompleted(state))
        return state

    def _load_backup(self):
        try:
            text = self.storage.read_backup(self.key)
            if text is None:
                return None
            result = decode_envelope(text)
        except (OSError, SaveError) as e:
            logger.error("Backup save is unusable: %s", e)
            return None
        logger.warning("Recovered player state from backup save")
        return result

    def has_save(self) -> bool:
        try:
            return self.storage.exists(self.key)
        except OSError:
            logger.exception("Could not check for save data")
            return False

    def delete_save(self) -> None:
        try:
            self.storage.delete(self.key)
            logger.info("Save data deleted")
        except OSError:
            logger.exception("Failed to delete save data")

    def enable_auto_save(self) -> None:
        self.auto_save_enabled = True
        logger.debug("Auto-save enabled")

    def disable_auto_save(self) -> None:
        self.auto_save_enabled = False
        logger.debug("Auto-save disabled")

    def tick(self, state: PlayerState, dt: float = 1.0) -> bool:
        """Advance the auto-save timer; saves and returns True once the interval elapses."""
        if not self.auto_save_enabled:
            return False
        self._since_last_save += max(0.0, dt)
        if self._since_last_save >= self.auto_save_interval:
            return self.save(state)
        return False
