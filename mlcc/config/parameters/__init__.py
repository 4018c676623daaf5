"""
Parameter matrix, explicit configuration collection and precedence resolution.
"""

from .matrix import (
    ParameterSpec, PARAMETER_MATRIX, get_parameter_spec, is_promptable, parameters_for_phase,
    validate_parameter_value, generate_project_name, generate_codebuild_project_name
)
from .resolver import ParameterResolver, ResolvedParameter, has_value, resolved_values
from .explicit import collect_explicit_configuration, default_providers, environment_provider

__all__ = [
    # Matrix
    'ParameterSpec',
    'PARAMETER_MATRIX',
    'get_parameter_spec',
    'is_promptable',
    'parameters_for_phase',
    'validate_parameter_value',
    'generate_project_name',
    'generate_codebuild_project_name',

    # Resolution
    'ParameterResolver',
    'ResolvedParameter',
    'has_value',
    'resolved_values',

    # Explicit configuration
    'collect_explicit_configuration',
    'default_providers',
    'environment_provider'
]
