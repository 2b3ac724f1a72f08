"""Persistence subsystem.

This package provides:
- A versioned JSON envelope around PlayerState, validated against a bundled schema
- Storage backends (in-memory and atomic file storage with a backup copy)
- The PersistenceGateway that handles save, load, offline catch-up and autosave
"""

from .codec import decode_envelope, encode_envelope, migrate_data
from .gateway import PersistenceGateway
from .paths import default_save_root
from .storage import FileStorage, InMemoryStorage, Storage

__all__ = [
    "FileStorage",
    "InMemoryStorage",
    "PersistenceGateway",
    "Storage",
    "decode_envelope",
    "default_save_root",
    "encode_envelope",
    "migrate_data",
]
