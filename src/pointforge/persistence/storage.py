from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Dict, Optional

from ..errors import CorruptSaveError

logger = logging.getLogger(__name__)


class Storage:
    """Durable key/value storage holding one named text blob per key."""

    def read(self, key: str) -> Optional[str]:  # pragma: no cover - interface
        raise NotImplementedError

    def read_backup(self, key: str) -> Optional[str]:
        """Previous version of the blob, when the backend keeps one."""
        return None

    def write(self, key: str, text: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def exists(self, key: str) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    def delete(self, key: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class InMemoryStorage(Storage):
    """Test/deterministic in-memory storage."""

    def __init__(self) -> None:
        self._blobs: Dict[str, str] = {}

    def read(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def write(self, key: str, text: str) -> None:
        self._blobs[key] = text

    def exists(self, key: str) -> bool:
        return key in self._blobs

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)


class FileStorage(Storage):
    """Stores each key as ``<root>/<key>.json`` with atomic replace and a ``.bak`` copy."""

    def __init__(self, root: os.PathLike | str) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def _backup_path(self, key: str) -> Path:
        path = self.path_for(key)
        return path.with_suffix(path.suffix + ".bak")

    def read(self, key: str) -> Optional[str]:
        return self._read_text(self.path_for(key))

    def read_backup(self, key: str) -> Optional[str]:
        return self._read_text(self._backup_path(key))

    @staticmethod
    def _read_text(path: Path) -> Optional[str]:
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptSaveError(f"{path} is not valid UTF-8 text") from e

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def delete(self, key: str) -> None:
        for path in (self.path_for(key), self._backup_path(key)):
            if path.exists():
                path.unlink()
                logger.debug("Deleted %s", path)

    def write(self, key: str, text: str) -> None:
        """Write atomically, keeping the previous file as a backup.

        Strategy:
        - Write to <path>.tmp, flush and fsync
        - Move the existing file to <path>.bak
        - Rename the tmp file over the target
        """
        path = self.path_for(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        bak = self._backup_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open("w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            try:
                shutil.copy2(str(path), str(bak))
            except OSError:
                logger.warning("Could not back up %s", path, exc_info=True)
        os.replace(tmp, path)
        logger.debug("Wrote %d bytes to %s", len(text), path)
