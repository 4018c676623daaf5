"""
Core exceptions for the mlcc configuration engine.

Business-rule findings are returned as structured results; the classes here
cover data errors raised at load time and the conditions that end a run.
"""

# Base exceptions
from .base import (
    MlccError,
    ValidationError,
    ConfigurationError,
    NotFoundError
)

# Registry exceptions
from .registry import (
    RegistryError,
    RegistryLoadError,
    SchemaError,
    ProfileNotFoundError
)

# Run exceptions
from .run import (
    UserAbort,
    CompatibilityError
)

__all__ = [
    # Base exceptions
    'MlccError',
    'ValidationError',
    'ConfigurationError',
    'NotFoundError',

    # Registry exceptions
    'RegistryError',
    'RegistryLoadError',
    'SchemaError',
    'ProfileNotFoundError',

    # Run exceptions
    'UserAbort',
    'CompatibilityError'
]
