"""
Registry-related exceptions.
"""

from typing import List, Optional

from .base import MlccError, NotFoundError


class RegistryError(MlccError):
    """Base exception for registry operations."""
    pass


class RegistryLoadError(RegistryError):
    """Raised when a registry data file cannot be read or parsed."""

    def __init__(self, registry_name: str, source: str = None, reason: str = None):
        self.registry_name = registry_name
        self.source = source
        self.reason = reason
        message = f"Failed to load {registry_name} registry"
        if source:
            message += f" from '{source}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class SchemaError(RegistryError):
    """Raised at load time when registry data violates its schema."""

    def __init__(self, registry_name: str, errors: Optional[List[str]] = None):
        self.registry_name = registry_name
        self.errors = list(errors or [])
        message = f"{registry_name} registry failed schema validation"
        if self.errors:
            message += ": " + "; ".join(self.errors)
        super().__init__(message)


class ProfileNotFoundError(NotFoundError):
    """Raised when a named profile is requested but not declared on the entry."""

    def __init__(self, profile_name: str, entry_key: str = None, available: Optional[List[str]] = None):
        self.profile_name = profile_name
        self.entry_key = entry_key
        self.available = list(available or [])
        super().__init__("Profile", identifier=profile_name, scope=entry_key)
        if self.available:
            self.args = (f"{self.args[0]}. Available: {', '.join(self.available)}",)
