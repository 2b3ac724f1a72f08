"""
PointForge core package.

Headless progression logic for an incremental (clicker) game:
- PointEngine: point balance, click and idle production
- UpgradeEngine: exponentially priced production upgrades
- AchievementEngine: event-driven milestone tracking and rewards
- PrestigeEngine: soft reset for a persistent meta-currency and its upgrade tree
- OfflineRewardsEngine: capped, discounted catch-up for time spent away
- PersistenceGateway: versioned JSON saves with autosave

Hosts (a UI, the bundled CLI, tests) compose these through GameSession and
listen on the EventBus.
"""
from .definitions import DefinitionCatalog, load_catalog
from .engines import AchievementEngine, OfflineRewardsEngine, PointEngine, PrestigeEngine, UpgradeEngine
from .errors import (
    CatalogError,
    CorruptSaveError,
    MissingDependencyError,
    PointForgeError,
    SaveError,
    StateValidationError,
    UnknownDefinitionError,
)
from .events import EventBus
from .game import GameSession
from .persistence import FileStorage, InMemoryStorage, PersistenceGateway
from .settings import Settings
from .state import PlayerState

__version__ = "1.0.0"

__all__ = [
    "AchievementEngine",
    "CatalogError",
    "CorruptSaveError",
    "DefinitionCatalog",
    "EventBus",
    "FileStorage",
    "GameSession",
    "InMemoryStorage",
    "MissingDependencyError",
    "OfflineRewardsEngine",
    "PersistenceGateway",
    "PlayerState",
    "PointEngine",
    "PointForgeError",
    "PrestigeEngine",
    "SaveError",
    "Settings",
    "StateValidationError",
    "UnknownDefinitionError",
    "UpgradeEngine",
    "load_catalog",
]
