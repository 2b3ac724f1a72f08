from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, TypeVar

from jsonschema import Draft202012Validator
from pydantic import BaseModel, ValidationError

from ..errors import CatalogError
from .defaults import default_achievements, default_prestige_upgrades, default_upgrades
from .models import AchievementDefinition, PrestigeUpgradeDefinition, UpgradeDefinition

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


@lru_cache(maxsize=1)
def _load_catalog_schema() -> Dict[str, Any]:
    with resources.files("pointforge.definitions").joinpath("schemas/catalog.schema.json").open(
        "r", encoding="utf-8"
    ) as fh:
        return json.load(fh)


def _index(kind: str, items: Iterable[M]) -> Dict[str, M]:
    out: Dict[str, M] = {}
    for item in items:
        item_id = getattr(item, "id")
        if item_id in out:
            raise CatalogError(f"Duplicate {kind} id: {item_id}")
        out[item_id] = item
    return out


class DefinitionCatalog:
    """Read-only collection of all static definitions, indexed by id.

    Iteration order follows authoring order; engines rely on it for
    deterministic recalculation and event ordering.
    """

    def __init__(
        self,
        upgrades: Sequence[UpgradeDefinition] = (),
        achievements: Sequence[AchievementDefinition] = (),
        prestige_upgrades: Sequence[PrestigeUpgradeDefinition] = (),
    ) -> None:
        self._upgrades = _index("upgrade", upgrades)
        self._achievements = _index("achievement", achievements)
        self._prestige_upgrades = _index("prestige upgrade", prestige_upgrades)

    @classmethod
    def default(cls) -> "DefinitionCatalog":
        return cls(default_upgrades(), default_achievements(), default_prestige_upgrades())

    @property
    def upgrades(self) -> List[UpgradeDefinition]:
        return list(self._upgrades.values())

    @property
    def achievements(self) -> List[AchievementDefinition]:
        return list(self._achievements.values())

    @property
    def prestige_upgrades(self) -> List[PrestigeUpgradeDefinition]:
        return list(self._prestige_upgrades.values())

    def upgrade(self, upgrade_id: str) -> Optional[UpgradeDefinition]:
        return self._upgrades.get(upgrade_id)

    def achievement(self, achievement_id: str) -> Optional[AchievementDefinition]:
        return self._achievements.get(achievement_id)

    def prestige_upgrade(self, upgrade_id: str) -> Optional[PrestigeUpgradeDefinition]:
        return self._prestige_upgrades.get(upgrade_id)

    def __repr__(self) -> str:
        return (
            f"DefinitionCatalog(upgrades={len(self._upgrades)}, achievements={len(self._achievements)}, "
            f"prestige_upgrades={len(self._prestige_upgrades)})"
        )


def validate_catalog_dict(data: Dict[str, Any]) -> None:
    """Validate raw catalog data against the bundled JSON schema.

    Raises:
        CatalogError listing every schema violation.
    """
    validator = Draft202012Validator(_load_catalog_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: str(list(e.path)))
    if errors:
        parts = []
        for err in errors:
            path = "/".join(str(p) for p in err.path) or "<root>"
            logger.error("Catalog schema validation error at %s: %s", path, err.message)
            parts.append(f"{path}: {err.message}")
        raise CatalogError("Catalog validation failed: " + "; ".join(parts))


def catalog_from_dict(data: Dict[str, Any]) -> DefinitionCatalog:
    validate_catalog_dict(data)
    try:
        return DefinitionCatalog(
            upgrades=[UpgradeDefinition(**u) for u in data.get("upgrades", [])],
            achievements=[AchievementDefinition(**a) for a in data.get("achievements", [])],
            prestige_upgrades=[PrestigeUpgradeDefinition(**p) for p in data.get("prestige_upgrades", [])],
        )
    except ValidationError as e:
        raise CatalogError(f"Invalid definition: {e}") from e


def load_catalog(path: os.PathLike | str) -> DefinitionCatalog:
    """Load a definition catalog from a JSON file.

    Sections that are absent stay empty; use ``DefinitionCatalog.default()``
    for the built-in content.
    """
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog {p} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise CatalogError(f"Catalog {p} must contain a JSON object")
    catalog = catalog_from_dict(data)
    logger.info("Loaded catalog from %s: %r", p, catalog)
    return catalog
