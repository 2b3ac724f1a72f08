"""Static game definitions: upgrades, achievements and prestige upgrades."""

from .catalog import DefinitionCatalog, catalog_from_dict, load_catalog, validate_catalog_dict
from .models import (
    AchievementDefinition,
    AchievementType,
    PrestigeUpgradeDefinition,
    PrestigeUpgradeType,
    UpgradeDefinition,
)

__all__ = [
    "AchievementDefinition",
    "AchievementType",
    "DefinitionCatalog",
    "PrestigeUpgradeDefinition",
    "PrestigeUpgradeType",
    "UpgradeDefinition",
    "catalog_from_dict",
    "load_catalog",
    "validate_catalog_dict",
]
