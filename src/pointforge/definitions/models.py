from __future__ import annotations

import decimal
import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import DEFAULT_COST_MULTIPLIER, MAX_COST


class AchievementType(str, Enum):
    TOTAL_POINTS = "total_points"
    TOTAL_CLICKS = "total_clicks"
    UPGRADE_COUNT = "upgrade_count"
    TIME_SPENT = "time_spent"
    POINTS_PER_SECOND = "points_per_second"
    POINTS_PER_CLICK = "points_per_click"
    REACH_LEVEL = "reach_level"
    MAX_UPGRADE_LEVEL = "max_upgrade_level"


class PrestigeUpgradeType(str, Enum):
    GLOBAL_MULTIPLIER = "global_multiplier"
    CLICK_MULTIPLIER = "click_multiplier"
    IDLE_MULTIPLIER = "idle_multiplier"
    UPGRADE_DISCOUNT = "upgrade_discount"
    OFFLINE_BONUS = "offline_bonus"
    AUTO_CLICKER = "auto_clicker"


def exponential_cost(base_cost: int, multiplier: float, level: int) -> int:
    """``round(base_cost * multiplier ** level)`` in decimal arithmetic, saturating at MAX_COST.

    Halves round up, so ``exponential_cost(10, 1.15, 1) == 12``.
    """
    level = max(0, level)
    try:
        value = Decimal(base_cost) * Decimal(str(multiplier)) ** level
    except decimal.Overflow:
        return MAX_COST
    if value >= MAX_COST:
        return MAX_COST
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class UpgradeDefinition(BaseModel):
    """A production upgrade as authored in the catalog.

    ``name`` and ``description`` are display-text keys resolved by the
    presentation layer; the core never interprets them.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique upgrade id")
    name: str = Field("", description="Display-text key for the name")
    description: str = Field("", description="Display-text key for the description")
    base_cost: int = Field(..., ge=0, description="Price of the first level")
    cost_multiplier: float = Field(DEFAULT_COST_MULTIPLIER, gt=0, description="Price growth per owned level")
    per_click_effect: int = Field(0, ge=0, description="Points per click added per level")
    per_second_effect: int = Field(0, ge=0, description="Points per second added per level")
    max_level: int = Field(0, ge=0, description="Maximum level, 0 for unlimited")

    def cost_at(self, level: int) -> int:
        """Price of the next level when ``level`` levels are already owned."""
        return exponential_cost(self.base_cost, self.cost_multiplier, level)

    def is_maxed(self, level: int) -> bool:
        return self.max_level > 0 and level >= self.max_level


class AchievementDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    description: str = ""
    type: AchievementType = AchievementType.TOTAL_POINTS
    target_value: int = Field(0, ge=0)
    reward_points: int = Field(0, ge=0)
    reward_click_bonus: int = Field(0, ge=0)
    reward_idle_bonus: int = Field(0, ge=0)
    is_hidden: bool = False


class PrestigeUpgradeDefinition(BaseModel):
    """A permanent upgrade bought with prestige points."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    description: str = ""
    base_cost: int = Field(1, ge=0)
    cost_multiplier: float = Field(1.5, gt=0)
    base_effect_value: float = 1.0
    effect_increment_per_level: float = 0.1
    upgrade_type: PrestigeUpgradeType = PrestigeUpgradeType.GLOBAL_MULTIPLIER
    max_level: int = Field(100, ge=0)

    @field_validator("base_effect_value", "effect_increment_per_level")
    @classmethod
    def finite_effect(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("effect values must be finite")
        return v

    def cost_at(self, level: int) -> int:
        return exponential_cost(self.base_cost, self.cost_multiplier, level)

    def effect_at(self, level: int) -> float:
        """Per-level effect once ``level`` levels are owned (increments after the first)."""
        if level <= 0:
            return 0.0
        return self.base_effect_value + self.effect_increment_per_level * (level - 1)
