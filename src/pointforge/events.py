import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Type, TypeVar

if TYPE_CHECKING:
    from .definitions.models import AchievementDefinition
    from .state.models import PlayerState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventBus:
    """Synchronous in-process event bus for progression events.

    Subscribers are keyed by event class; events are emitted by instance.
    Handlers run inline, in subscription order, before ``emit`` returns, so a
    reaction to an event is always applied within the same tick as its cause.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._subscribers: Dict[Type[Any], List[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        with self._lock:
            self._subscribers.setdefault(event_type, []).append(handler)  # type: ignore[arg-type]
            logger.debug("Subscribed %s to %s", getattr(handler, "__name__", handler), event_type.__name__)

    def unsubscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                if not handlers:
                    self._subscribers.pop(event_type, None)

    def emit(self, event: Any) -> None:
        """Deliver ``event`` to every handler subscribed to its class (or a base class).

        Handler exceptions are logged so one failing listener cannot abort
        the game-logic call that emitted the event.
        """
        with self._lock:
            for event_type, handlers in list(self._subscribers.items()):
                if isinstance(event, event_type):
                    for h in list(handlers):
                        try:
                            h(event)
                        except Exception:  # noqa: BLE001 - log and keep delivering
                            logger.exception("Error in handler for %s", type(event).__name__)


@dataclass(frozen=True)
class PointsChanged:
    current: int


@dataclass(frozen=True)
class PointsPerClickChanged:
    points_per_click: int


@dataclass(frozen=True)
class PointsPerSecondChanged:
    points_per_second: int


@dataclass(frozen=True)
class Clicked:
    total_clicks: int


@dataclass(frozen=True)
class UpgradePurchased:
    upgrade_id: str
    new_level: int


@dataclass(frozen=True)
class UpgradePurchaseFailed:
    upgrade_id: str
    reason: str  # "unknown", "max_level", "insufficient_points"


@dataclass(frozen=True)
class AchievementUnlocked:
    definition: "AchievementDefinition"


@dataclass(frozen=True)
class AchievementProgressChanged:
    achievement_id: str
    current: int
    target: int


@dataclass(frozen=True)
class PrestigePerformed:
    gained_points: int
    new_level: int


@dataclass(frozen=True)
class PrestigePointsChanged:
    current: int


@dataclass(frozen=True)
class PrestigeAvailabilityChanged:
    available: bool


@dataclass(frozen=True)
class OfflineRewardsApplied:
    amount: int
    seconds: float


@dataclass(frozen=True)
class SaveCompleted:
    saved_at: str


@dataclass(frozen=True)
class LoadCompleted:
    state: "PlayerState"
