"""
System settings for the configuration engine.
"""

from .settings import EngineSettings, ValidationOptions

__all__ = [
    'EngineSettings',
    'ValidationOptions'
]
