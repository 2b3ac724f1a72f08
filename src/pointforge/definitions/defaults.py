"""Built-in definition sets used when no external catalog file is supplied."""

from __future__ import annotations

from typing import List

from .models import (
    AchievementDefinition,
    AchievementType,
    PrestigeUpgradeDefinition,
    PrestigeUpgradeType,
    UpgradeDefinition,
)


def default_upgrades() -> List[UpgradeDefinition]:
    return [
        UpgradeDefinition(
            id="stronger_finger",
            name="upgrade.stronger_finger.name",
            description="upgrade.stronger_finger.desc",
            base_cost=10,
            cost_multiplier=1.15,
            per_click_effect=1,
        ),
        UpgradeDefinition(
            id="auto_tapper",
            name="upgrade.auto_tapper.name",
            description="upgrade.auto_tapper.desc",
            base_cost=50,
            cost_multiplier=1.15,
            per_second_effect=1,
        ),
        UpgradeDefinition(
            id="point_factory",
            name="upgrade.point_factory.name",
            description="upgrade.point_factory.desc",
            base_cost=500,
            cost_multiplier=1.2,
            per_second_effect=10,
        ),
        UpgradeDefinition(
            id="golden_cursor",
            name="upgrade.golden_cursor.name",
            description="upgrade.golden_cursor.desc",
            base_cost=2_000,
            cost_multiplier=1.25,
            per_click_effect=15,
            max_level=25,
        ),
        UpgradeDefinition(
            id="quantum_reactor",
            name="upgrade.quantum_reactor.name",
            description="upgrade.quantum_reactor.desc",
            base_cost=50_000,
            cost_multiplier=1.3,
            per_click_effect=50,
            per_second_effect=250,
            max_level=10,
        ),
    ]


def default_achievements() -> List[AchievementDefinition]:
    t = AchievementType
    rows = [
        # id, type, target, points, click bonus, idle bonus, hidden
        ("first_point", t.TOTAL_POINTS, 1, 10, 1, 0, False),
        ("hundred_points", t.TOTAL_POINTS, 100, 50, 2, 0, False),
        ("thousand_points", t.TOTAL_POINTS, 1_000, 200, 5, 1, False),
        ("million_points", t.TOTAL_POINTS, 1_000_000, 5_000, 50, 10, False),
        ("first_click", t.TOTAL_CLICKS, 1, 5, 1, 0, False),
        ("hundred_clicks", t.TOTAL_CLICKS, 100, 100, 3, 0, False),
        ("thousand_clicks", t.TOTAL_CLICKS, 1_000, 500, 10, 2, False),
        ("first_upgrade", t.UPGRADE_COUNT, 1, 25, 2, 1, False),
        ("ten_upgrades", t.UPGRADE_COUNT, 10, 1_000, 20, 5, False),
        ("auto_generation", t.POINTS_PER_SECOND, 1, 50, 0, 2, False),
        ("idle_master", t.POINTS_PER_SECOND, 100, 2_000, 0, 20, False),
        ("power_click", t.POINTS_PER_CLICK, 10, 200, 5, 0, False),
        ("mega_click", t.POINTS_PER_CLICK, 100, 1_000, 25, 0, False),
        ("secret_achievement", t.TOTAL_POINTS, 999_999, 10_000, 100, 50, True),
    ]
    return [
        AchievementDefinition(
            id=aid,
            name=f"achievement.{aid}.name",
            description=f"achievement.{aid}.desc",
            type=kind,
            target_value=target,
            reward_points=points,
            reward_click_bonus=click,
            reward_idle_bonus=idle,
            is_hidden=hidden,
        )
        for aid, kind, target, points, click, idle, hidden in rows
    ]


def default_prestige_upgrades() -> List[PrestigeUpgradeDefinition]:
    t = PrestigeUpgradeType
    return [
        PrestigeUpgradeDefinition(
            id="global_multiplier",
            name="prestige.global_multiplier.name",
            description="prestige.global_multiplier.desc",
            base_cost=1,
            cost_multiplier=2.0,
            base_effect_value=0.1,
            effect_increment_per_level=0.0,
            upgrade_type=t.GLOBAL_MULTIPLIER,
            max_level=50,
        ),
        PrestigeUpgradeDefinition(
            id="click_multiplier",
            name="prestige.click_multiplier.name",
            description="prestige.click_multiplier.desc",
            base_cost=2,
            cost_multiplier=2.5,
            base_effect_value=0.2,
            effect_increment_per_level=0.0,
            upgrade_type=t.CLICK_MULTIPLIER,
            max_level=25,
        ),
        PrestigeUpgradeDefinition(
            id="idle_multiplier",
            name="prestige.idle_multiplier.name",
            description="prestige.idle_multiplier.desc",
            base_cost=3,
            cost_multiplier=2.2,
            base_effect_value=0.15,
            effect_increment_per_level=0.0,
            upgrade_type=t.IDLE_MULTIPLIER,
            max_level=30,
        ),
        PrestigeUpgradeDefinition(
            id="upgrade_discount",
            name="prestige.upgrade_discount.name",
            description="prestige.upgrade_discount.desc",
            base_cost=5,
            cost_multiplier=3.0,
            base_effect_value=0.05,
            effect_increment_per_level=0.0,
            upgrade_type=t.UPGRADE_DISCOUNT,
            max_level=20,
        ),
        PrestigeUpgradeDefinition(
            id="offline_bonus",
            name="prestige.offline_bonus.name",
            description="prestige.offline_bonus.desc",
            base_cost=2,
            cost_multiplier=2.0,
            base_effect_value=0.1,
            effect_increment_per_level=0.05,
            upgrade_type=t.OFFLINE_BONUS,
            max_level=10,
        ),
        PrestigeUpgradeDefinition(
            id="auto_clicker",
            name="prestige.auto_clicker.name",
            description="prestige.auto_clicker.desc",
            base_cost=10,
            cost_multiplier=4.0,
            base_effect_value=1.0,
            effect_increment_per_level=0.0,
            upgrade_type=t.AUTO_CLICKER,
            max_level=5,
        ),
    ]
