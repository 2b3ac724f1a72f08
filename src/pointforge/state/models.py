from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from ..constants import INITIAL_POINTS, INITIAL_POINTS_PER_CLICK, INITIAL_POINTS_PER_SECOND, MAX_POINTS
from ..errors import StateValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def parse_timestamp(value: Any, field_name: str) -> Optional[datetime]:
    """Parse an ISO 8601 string (or epoch seconds) into an aware UTC datetime."""
    if value is None or value == "":
        return None
    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        parsed = datetime.fromisoformat(str(value))
    except (TypeError, ValueError, OverflowError, OSError) as e:
        raise StateValidationError(f"{field_name} is not a valid timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _int(data: Mapping[str, Any], key: str, default: int = 0, minimum: Optional[int] = 0) -> int:
    raw = data.get(key, default)
    if isinstance(raw, bool):
        raise StateValidationError(f"{key} must be an integer")
    try:
        value = int(raw)
    except (TypeError, ValueError) as e:
        raise StateValidationError(f"{key} must be an integer, got {raw!r}") from e
    if minimum is not None and value < minimum:
        raise StateValidationError(f"{key} must be >= {minimum}, got {value}")
    if value > MAX_POINTS:
        raise StateValidationError(f"{key} exceeds the 64-bit range")
    return value


def _float(data: Mapping[str, Any], key: str, default: float, minimum: Optional[float] = None) -> float:
    raw = data.get(key, default)
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise StateValidationError(f"{key} must be a number, got {raw!r}") from e
    if not math.isfinite(value):
        raise StateValidationError(f"{key} must be finite, got {value}")
    if minimum is not None and value < minimum:
        raise StateValidationError(f"{key} must be >= {minimum}, got {value}")
    return value


def _mapping(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    raw = data.get(key) or {}
    if not isinstance(raw, Mapping):
        raise StateValidationError(f"{key} must be an object")
    return raw


def _levels(data: Mapping[str, Any], key: str) -> Dict[str, int]:
    raw = _mapping(data, key)
    return {str(k): _int(raw, k) for k in raw}


@dataclass
class AchievementProgress:
    """Per-player progress towards one achievement. ``unlocked`` only goes False -> True."""

    unlocked: bool = False
    progress: int = 0
    unlocked_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unlocked": self.unlocked,
            "progress": self.progress,
            "unlocked_at": format_timestamp(self.unlocked_at),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "AchievementProgress":
        if not isinstance(data, Mapping):
            raise StateValidationError("achievement progress must be an object")
        return AchievementProgress(
            unlocked=bool(data.get("unlocked", False)),
            progress=_int(data, "progress", minimum=None),
            unlocked_at=parse_timestamp(data.get("unlocked_at"), "unlocked_at"),
        )


@dataclass
class PrestigeState:
    """Prestige progress. Survives every prestige reset."""

    level: int = 0
    total_prestige_points: int = 0
    current_prestige_points: int = 0
    global_multiplier: float = 1.0
    last_prestige_time: Optional[datetime] = None
    upgrade_levels: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "total_prestige_points": self.total_prestige_points,
            "current_prestige_points": self.current_prestige_points,
            "global_multiplier": self.global_multiplier,
            "last_prestige_time": format_timestamp(self.last_prestige_time),
            "upgrade_levels": dict(self.upgrade_levels),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "PrestigeState":
        return PrestigeState(
            level=_int(data, "level"),
            total_prestige_points=_int(data, "total_prestige_points"),
            current_prestige_points=_int(data, "current_prestige_points"),
            global_multiplier=_float(data, "global_multiplier", 1.0, minimum=1.0),
            last_prestige_time=parse_timestamp(data.get("last_prestige_time"), "last_prestige_time"),
            upgrade_levels=_levels(data, "upgrade_levels"),
        )


@dataclass
class PlayerState:
    """Single source of truth for a player's progression.

    Only the engines mutate an instance; everything else reads it.
    ``points_per_click`` and ``points_per_second`` are derived values that
    are recomputed from ``upgrade_levels`` after any bulk change.
    """

    current_points: int = INITIAL_POINTS
    points_per_click: int = INITIAL_POINTS_PER_CLICK
    points_per_second: int = INITIAL_POINTS_PER_SECOND
    total_clicks: int = 0
    total_upgrades_purchased: int = 0
    play_start_time: datetime = field(default_factory=utcnow)
    total_play_time_seconds: float = 0.0
    upgrade_levels: Dict[str, int] = field(default_factory=dict)
    achievements: Dict[str, AchievementProgress] = field(default_factory=dict)
    prestige: PrestigeState = field(default_factory=PrestigeState)

    def __post_init__(self) -> None:
        if self.current_points < 0:
            raise StateValidationError("current_points must never be negative")
        if self.points_per_click < 1:
            raise StateValidationError("points_per_click must be at least 1")
        if self.points_per_second < 0:
            raise StateValidationError("points_per_second must not be negative")

    def upgrade_level(self, upgrade_id: str) -> int:
        return self.upgrade_levels.get(upgrade_id, 0)

    def achievement(self, achievement_id: str) -> AchievementProgress:
        """Return the progress record for an achievement, creating it if absent."""
        record = self.achievements.get(achievement_id)
        if record is None:
            record = AchievementProgress()
            self.achievements[achievement_id] = record
        return record

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_points": self.current_points,
            "points_per_click": self.points_per_click,
            "points_per_second": self.points_per_second,
            "total_clicks": self.total_clicks,
            "total_upgrades_purchased": self.total_upgrades_purchased,
            "play_start_time": format_timestamp(self.play_start_time),
            "total_play_time_seconds": self.total_play_time_seconds,
            "upgrade_levels": dict(self.upgrade_levels),
            "achievements": {k: v.to_dict() for k, v in self.achievements.items()},
            "prestige": self.prestige.to_dict(),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "PlayerState":
        if not isinstance(data, Mapping):
            raise StateValidationError("player state must be an object")
        achievements = _mapping(data, "achievements")
        return PlayerState(
            current_points=_int(data, "current_points"),
            points_per_click=_int(data, "points_per_click", INITIAL_POINTS_PER_CLICK, minimum=1),
            points_per_second=_int(data, "points_per_second"),
            total_clicks=_int(data, "total_clicks"),
            total_upgrades_purchased=_int(data, "total_upgrades_purchased"),
            play_start_time=parse_timestamp(data.get("play_start_time"), "play_start_time") or utcnow(),
            total_play_time_seconds=_float(data, "total_play_time_seconds", 0.0, minimum=0.0),
            upgrade_levels=_levels(data, "upgrade_levels"),
            achievements={str(k): AchievementProgress.from_dict(v) for k, v in achievements.items()},
            prestige=PrestigeState.from_dict(_mapping(data, "prestige")),
        )
