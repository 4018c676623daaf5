"""
Registry module for the mlcc configuration engine.

This module loads the framework, model and instance registries, exposes
lookups (including wildcard model patterns) and applies named profiles.
"""

from .entries import (
    AcceleratorSpec,
    VersionRange,
    Profile,
    FrameworkEntry,
    ModelEntry,
    InstanceAccelerator,
    InstanceEntry,
    freeze_mapping
)
from .store import PatternTable, RegistryMatch, RegistryStore, compile_wildcard
from .loader import RegistryLoader, build_store, load_registry_store, clear_registry_cache
from .profiles import overlay, apply_profile, get_profile, list_profiles
from .schema import validate_registry_document
from .merge import MergedConfiguration, merge_configurations
from .export import (
    DeploymentReport, ExportResult, export_configuration, should_offer_export,
    extract_model_family, determine_validation_level
)

__all__ = [
    # Records
    'AcceleratorSpec',
    'VersionRange',
    'Profile',
    'FrameworkEntry',
    'ModelEntry',
    'InstanceAccelerator',
    'InstanceEntry',
    'freeze_mapping',

    # Store
    'PatternTable',
    'RegistryMatch',
    'RegistryStore',
    'compile_wildcard',

    # Loading
    'RegistryLoader',
    'build_store',
    'load_registry_store',
    'clear_registry_cache',
    'validate_registry_document',

    # Profiles
    'overlay',
    'apply_profile',
    'get_profile',
    'list_profiles',

    # Merge and export
    'MergedConfiguration',
    'merge_configurations',
    'DeploymentReport',
    'ExportResult',
    'export_configuration',
    'should_offer_export',
    'extract_model_family',
    'determine_validation_level'
]
