from __future__ import annotations

import json
import logging
from datetime import datetime
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, Tuple

from jsonschema import Draft202012Validator

from ..constants import SCHEMA_VERSION
from ..errors import CorruptSaveError, StateValidationError
from ..state.models import PlayerState, format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _save_validator() -> Draft202012Validator:
    with resources.files("pointforge.persistence").joinpath("schemas/save.schema.json").open(
        "r", encoding="utf-8"
    ) as fh:
        return Draft202012Validator(json.load(fh))


def encode_envelope(state: PlayerState, saved_at: datetime) -> str:
    """Wrap state with its save timestamp and schema version and serialize to JSON."""
    envelope = {
        "state": state.to_dict(),
        "save_timestamp": format_timestamp(saved_at),
        "schema_version": SCHEMA_VERSION,
    }
    return json.dumps(envelope, ensure_ascii=False, sort_keys=True, indent=2)


def decode_envelope(text: str) -> Tuple[PlayerState, datetime]:
    """Decode JSON text into (state, saved_at) with schema validation and migration.

    Raises:
        CorruptSaveError for anything that is not a readable save.
    """
    try:
        data = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise CorruptSaveError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise CorruptSaveError("Save envelope must be a JSON object")

    errors = sorted(_save_validator().iter_errors(data), key=lambda e: str(list(e.path)))
    if errors:
        first = errors[0]
        path = "/".join(str(p) for p in first.path) or "<root>"
        raise CorruptSaveError(f"Save envelope invalid at {path}: {first.message}")

    data = migrate_data(data, from_version=int(data["schema_version"]), to_version=int(SCHEMA_VERSION))

    try:
        state = PlayerState.from_dict(data["state"])
        saved_at = parse_timestamp(data["save_timestamp"], "save_timestamp")
    except StateValidationError as e:
        raise CorruptSaveError(str(e)) from e
    if saved_at is None:
        raise CorruptSaveError("save_timestamp is empty")
    return state, saved_at


def migrate_data(data: Dict[str, Any], from_version: int, to_version: int) -> Dict[str, Any]:
    """Migrate envelope data between schema versions, one step at a time."""
    if from_version == to_version:
        return data
    if from_version > to_version:
        raise CorruptSaveError(f"Save schema version {from_version} is newer than supported {to_version}.")
    # No stepwise migrations exist below the current version yet
    logger.info("Migrating save from schema %s to %s", from_version, to_version)
    data["schema_version"] = str(to_version)
    return data
