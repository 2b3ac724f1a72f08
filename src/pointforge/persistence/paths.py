from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "pointforge"
APP_AUTHOR = "pointforge"


def default_save_root() -> Path:
    """Return the platform-specific directory for save files.

    ``POINTFORGE_SAVE_DIR`` overrides the platform default.
    """
    override = os.getenv("POINTFORGE_SAVE_DIR")
    if override:
        return Path(override)
    return Path(user_data_dir(appname=APP_NAME, appauthor=APP_AUTHOR)) / "saves"
