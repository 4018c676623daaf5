"""
Core configuration management components.

- ConfigProvider: Abstract provider interface and implementations
- ConfigValidator: Validation framework for configuration and registry documents
"""

from .provider import ConfigProvider, FileConfigProvider, RuntimeConfigProvider, EnvironmentConfigProvider
from .validator import ConfigValidator, SchemaValidator, BusinessValidator, SchemaIssue, SchemaResult

__all__ = [
    # Providers
    'ConfigProvider',
    'FileConfigProvider',
    'RuntimeConfigProvider',
    'EnvironmentConfigProvider',

    # Validators
    'ConfigValidator',
    'SchemaValidator',
    'BusinessValidator',
    'SchemaIssue',
    'SchemaResult'
]
