"""
Validation module for the mlcc configuration engine.

Environment variable validation runs through pluggable strategies
registered on a ValidationEngine; instance type checks live in
CompatibilityValidator.
"""

from .base import (
    ValidationFinding,
    ValidationResult,
    StrategyResult,
    FrameworkContext,
    ValidationStrategy
)
from .known_flags import KnownFlagsStrategy
from .community_reports import CommunityReportsStrategy, report_applies
from .engine import ValidationEngine
from .compatibility import CompatibilityValidator, CompatibilityVerdict

__all__ = [
    'ValidationFinding',
    'ValidationResult',
    'StrategyResult',
    'FrameworkContext',
    'ValidationStrategy',
    'KnownFlagsStrategy',
    'CommunityReportsStrategy',
    'report_applies',
    'ValidationEngine',
    'CompatibilityValidator',
    'CompatibilityVerdict'
]
