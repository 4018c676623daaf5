"""
Configuration layer: providers, schema validation, engine settings and
parameter resolution.
"""

from .core import (
    ConfigProvider, FileConfigProvider, RuntimeConfigProvider, EnvironmentConfigProvider,
    ConfigValidator, SchemaValidator, BusinessValidator, SchemaIssue, SchemaResult
)
from .system import EngineSettings, ValidationOptions
from .parameters import (
    ParameterSpec, PARAMETER_MATRIX, ParameterResolver, ResolvedParameter,
    collect_explicit_configuration, default_providers
)
