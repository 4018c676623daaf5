"""
Core enums for the mlcc configuration engine.
"""

# Registry enums
from .registry import (
    AcceleratorType,
    ValidationLevel,
    MatchType,
    ConfigSource
)

# Validation enums
from .validation import (
    Severity,
    FlagType
)

# Parameter enums
from .parameters import (
    ParameterOrigin,
    Phase,
    DeployTarget
)

__all__ = [
    # Registry enums
    'AcceleratorType',
    'ValidationLevel',
    'MatchType',
    'ConfigSource',

    # Validation enums
    'Severity',
    'FlagType',

    # Parameter enums
    'ParameterOrigin',
    'Phase',
    'DeployTarget'
]
