"""
Validation-related enums.
"""

from enum import Enum


class Severity(Enum):
    """Severity of a validation finding."""
    WARNING = "warning"
    ERROR = "error"


class FlagType(Enum):
    """Value types a known flag may declare."""
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    STRING = "string"
