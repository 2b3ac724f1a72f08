from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml

from .constants import (
    AUTO_GENERATION_INTERVAL,
    AUTO_SAVE_INTERVAL,
    DEFAULT_MAX_OFFLINE_HOURS,
    DEFAULT_OFFLINE_EFFICIENCY,
    MIN_PRESTIGE_POINTS,
    SAVE_DATA_KEY,
)

logger = logging.getLogger(__name__)


@dataclass
class GameplaySettings:
    tick_interval: float = AUTO_GENERATION_INTERVAL
    max_catch_up_ticks: int = 5
    min_prestige_points: int = MIN_PRESTIGE_POINTS


@dataclass
class OfflineSettings:
    max_offline_hours: float = DEFAULT_MAX_OFFLINE_HOURS
    offline_efficiency: float = DEFAULT_OFFLINE_EFFICIENCY


@dataclass
class PersistenceSettings:
    auto_save_interval: float = AUTO_SAVE_INTERVAL
    save_key: str = SAVE_DATA_KEY
    save_dir: Optional[str] = None


# env var -> (section, key, converter)
ENV_OVERRIDES: Dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "POINTFORGE_AUTOSAVE_INTERVAL": ("persistence", "auto_save_interval", float),
    "POINTFORGE_SAVE_DIR": ("persistence", "save_dir", str),
    "POINTFORGE_MAX_OFFLINE_HOURS": ("offline", "max_offline_hours", float),
    "POINTFORGE_OFFLINE_EFFICIENCY": ("offline", "offline_efficiency", float),
    "POINTFORGE_TICK_INTERVAL": ("gameplay", "tick_interval", float),
}


@dataclass
class Settings:
    gameplay: GameplaySettings = field(default_factory=GameplaySettings)
    offline: OfflineSettings = field(default_factory=OfflineSettings)
    persistence: PersistenceSettings = field(default_factory=PersistenceSettings)

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @staticmethod
    def _env_overlay(environ: Optional[Dict[str, str]] = None) -> dict:
        environ = os.environ if environ is None else environ
        overlay: Dict[str, Dict[str, Any]] = {}
        for var, (section, key, convert) in ENV_OVERRIDES.items():
            raw = environ.get(var)
            if raw is None or raw.strip() == "":
                continue
            try:
                overlay.setdefault(section, {})[key] = convert(raw.strip())
            except ValueError:
                logger.warning("Ignoring invalid value for %s: %r", var, raw)
        return overlay

    @classmethod
    def _from_dict(cls, data: dict) -> "Settings":
        def pick(dc: Any, section: str) -> Any:
            known = {f.name for f in dataclasses.fields(dc)}
            values = data.get(section) or {}
            unknown = set(values) - known
            if unknown:
                logger.warning("Unknown %s settings ignored: %s", section, sorted(unknown))
            return dc(**{k: v for k, v in values.items() if k in known})

        return Settings(
            gameplay=pick(GameplaySettings, "gameplay"),
            offline=pick(OfflineSettings, "offline"),
            persistence=pick(PersistenceSettings, "persistence"),
        )

    @classmethod
    def load(cls, user_path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> "Settings":
        """Load settings from built-in defaults, an optional user YAML file and env vars.

        Later sources win: defaults < user file < environment.
        """
        try:
            with resources.files("pointforge.config").joinpath("default_settings.yaml").open(
                "r", encoding="utf-8"
            ) as f:
                default_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            default_data = dataclasses.asdict(Settings())

        user_data = {}
        if user_path is not None:
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)

        merged = cls._deep_merge(default_data, user_data)
        merged = cls._deep_merge(merged, cls._env_overlay(environ))
        settings = cls._from_dict(merged)
        logger.debug("Settings merged: %s", settings)
        return settings

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(dataclasses.asdict(self), f, sort_keys=False)
        logger.info("Saved settings to %s", path)
