from typing import Optional, TypeVar

T = TypeVar("T")


class PointForgeError(Exception):
    """Base error for pointforge domain exceptions."""


class MissingDependencyError(PointForgeError):
    """Raised at construction when a required collaborator was not supplied."""


class UnknownDefinitionError(PointForgeError):
    """Raised when a definition id is not present in the catalog."""


class CatalogError(PointForgeError):
    """Raised when definition catalog data is invalid or inconsistent."""


class SaveError(PointForgeError):
    """Base exception for save/load errors."""


class StateValidationError(SaveError):
    """Raised when validation of player state data fails."""


class CorruptSaveError(SaveError):
    """Raised when a save blob cannot be decoded into a player state."""


def require(value: Optional[T], name: str, owner: str) -> T:
    """Return value, or raise MissingDependencyError if it is None."""
    if value is None:
        raise MissingDependencyError(f"{owner} requires '{name}' but it was not provided")
    return value
