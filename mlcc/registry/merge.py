"""
Configuration merging.

Layers, lowest to highest precedence: framework base, framework profile,
external model metadata, model registry entry, model profile. Each layer
that contributes is recorded in ``config_sources``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from mlcc.core.enums import ConfigSource, MatchType, ValidationLevel
from mlcc.core.exceptions import ProfileNotFoundError
from .entries import AcceleratorSpec, FrameworkEntry, ModelEntry, Profile
from .profiles import get_profile, list_profiles, overlay
from .store import RegistryMatch


@dataclass
class MergedConfiguration:
    """Effective configuration for a (framework, version, model) selection."""
    framework: Optional[str] = None
    version: Optional[str] = None
    model_id: Optional[str] = None
    base_image: Optional[str] = None
    accelerator: Optional[AcceleratorSpec] = None
    env_vars: Dict[str, str] = field(default_factory=dict)
    inference_ami_version: Optional[str] = None
    chat_template: Optional[str] = None
    recommended_instance_types: List[str] = field(default_factory=list)
    config_sources: List[ConfigSource] = field(default_factory=list)
    validation_level: ValidationLevel = ValidationLevel.UNKNOWN
    match_type: Optional[MatchType] = None
    matched_pattern: Optional[str] = None
    framework_profile: Optional[str] = None
    model_profile: Optional[str] = None
    notes: Optional[str] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def source_names(self) -> List[str]:
        return [source.value for source in self.config_sources]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'framework': self.framework,
            'version': self.version,
            'modelId': self.model_id,
            'baseImage': self.base_image,
            'accelerator': self.accelerator.to_dict() if self.accelerator else None,
            'envVars': dict(self.env_vars),
            'inferenceAmiVersion': self.inference_ami_version,
            'chatTemplate': self.chat_template,
            'recommendedInstanceTypes': list(self.recommended_instance_types),
            'configSources': self.source_names,
            'validationLevel': self.validation_level.value,
            'matchType': self.match_type.value if self.match_type else None,
            'matchedPattern': self.matched_pattern,
            'generatedAt': self.generated_at.isoformat(),
        }


def _require_profile(entry, profile_name: Optional[str]) -> Optional[Profile]:
    if not profile_name:
        return None
    profile = get_profile(entry, profile_name)
    if profile is None:
        raise ProfileNotFoundError(profile_name, getattr(entry, 'key', None), list_profiles(entry))
    return profile


def _apply_profile_layer(merged: MergedConfiguration, profile: Profile):
    merged.env_vars = overlay(merged.env_vars, profile.env_vars)
    if profile.recommended_instance_types is not None:
        merged.recommended_instance_types = list(profile.recommended_instance_types)


def merge_configurations(framework: Optional[str] = None,
                         version: Optional[str] = None,
                         model_id: Optional[str] = None,
                         framework_entry: Optional[FrameworkEntry] = None,
                         framework_profile: Optional[str] = None,
                         model_metadata: Optional[Mapping[str, Any]] = None,
                         model_match: Optional[RegistryMatch] = None,
                         model_profile: Optional[str] = None) -> MergedConfiguration:
    """
    Merge registry layers into a new MergedConfiguration.

    Parameters
    ----------
    framework, version, model_id : str, optional
        The user's selections, kept as given
    framework_entry : FrameworkEntry, optional
        Base framework record; None when the pair is not in the registry
    framework_profile : str, optional
        Name of a profile declared on ``framework_entry``
    model_metadata : Mapping, optional
        External metadata; only ``chat_template`` is used
    model_match : RegistryMatch, optional
        Model registry hit
    model_profile : str, optional
        Name of a profile declared on the matched model entry

    Returns
    -------
    MergedConfiguration
        New object; registry records are not modified

    Raises
    ------
    ProfileNotFoundError
        If a profile name is given for an entry that does not declare it
    """
    merged = MergedConfiguration(
        framework=framework,
        version=version,
        model_id=model_id,
    )

    if framework_entry is not None:
        merged.base_image = framework_entry.base_image
        merged.accelerator = framework_entry.accelerator
        merged.env_vars = overlay(merged.env_vars, framework_entry.env_vars)
        merged.inference_ami_version = framework_entry.inference_ami_version
        merged.recommended_instance_types = list(framework_entry.recommended_instance_types)
        merged.validation_level = framework_entry.validation_level
        merged.match_type = MatchType.EXACT
        merged.notes = framework_entry.notes
        merged.config_sources.append(ConfigSource.FRAMEWORK_REGISTRY)

        profile = _require_profile(framework_entry, framework_profile)
        if profile is not None:
            _apply_profile_layer(merged, profile)
            merged.framework_profile = framework_profile
            merged.config_sources.append(ConfigSource.FRAMEWORK_PROFILE)

    if model_metadata:
        if model_metadata.get('chat_template'):
            merged.chat_template = model_metadata['chat_template']
        merged.config_sources.append(ConfigSource.HUGGINGFACE_HUB)

    if model_match is not None:
        model_entry: ModelEntry = model_match.entry
        if model_entry.chat_template:
            merged.chat_template = model_entry.chat_template
        merged.env_vars = overlay(merged.env_vars, model_entry.env_vars)
        if model_entry.recommended_instance_types is not None:
            merged.recommended_instance_types = list(model_entry.recommended_instance_types)
        merged.validation_level = model_entry.validation_level
        merged.match_type = model_match.match_type
        if model_match.match_type is MatchType.PATTERN:
            merged.matched_pattern = model_match.matched_key
        merged.config_sources.append(ConfigSource.MODEL_REGISTRY)

        profile = _require_profile(model_entry, model_profile)
        if profile is not None:
            _apply_profile_layer(merged, profile)
            merged.model_profile = model_profile
            merged.config_sources.append(ConfigSource.MODEL_PROFILE)

    if not merged.config_sources:
        merged.config_sources.append(ConfigSource.DEFAULT)

    return merged
