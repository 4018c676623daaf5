"""
Typed registry records.

Records are frozen dataclasses and their environment-variable maps are
read-only mappings, so registry data cannot be changed after load. Derived
records (profile applied, merged configuration) are always new objects.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from mlcc.core.enums import AcceleratorType, ValidationLevel


def freeze_mapping(values: Optional[Mapping[str, Any]] = None) -> Mapping[str, Any]:
    """Read-only copy of a mapping."""
    return MappingProxyType(dict(values or {}))


def _tuple_or_none(values) -> Optional[Tuple[str, ...]]:
    if values is None:
        return None
    return tuple(values)


@dataclass(frozen=True)
class VersionRange:
    """Inclusive accelerator version range."""
    min: str
    max: str

    @staticmethod
    def _key(version: str) -> Tuple[int, ...]:
        return tuple(int(part) if part.isdigit() else 0 for part in str(version).split('.'))

    def contains(self, version: str) -> bool:
        """True when ``min <= version <= max``, comparing dotted numeric components."""
        return self._key(self.min) <= self._key(version) <= self._key(self.max)

    def to_dict(self) -> Dict[str, str]:
        return {'min': self.min, 'max': self.max}


@dataclass(frozen=True)
class AcceleratorSpec:
    """Accelerator a framework image is built for."""
    type: AcceleratorType
    version: Optional[str] = None
    version_range: Optional[VersionRange] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AcceleratorSpec':
        version_range = data.get('versionRange')
        return cls(
            type=AcceleratorType(data['type']),
            version=data.get('version'),
            version_range=VersionRange(**version_range) if version_range else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {'type': self.type.value, 'version': self.version}
        if self.version_range:
            data['versionRange'] = self.version_range.to_dict()
        return data


@dataclass(frozen=True)
class Profile:
    """Named overlay of environment variables and recommended instances."""
    name: str
    display_name: str
    description: Optional[str] = None
    env_vars: Mapping[str, str] = field(default_factory=freeze_mapping)
    recommended_instance_types: Optional[Tuple[str, ...]] = None
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> 'Profile':
        return cls(
            name=name,
            display_name=data['displayName'],
            description=data.get('description'),
            env_vars=freeze_mapping(data.get('envVars')),
            recommended_instance_types=_tuple_or_none(data.get('recommendedInstanceTypes')),
            notes=data.get('notes'),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'displayName': self.display_name}
        if self.description is not None:
            data['description'] = self.description
        data['envVars'] = dict(self.env_vars)
        if self.recommended_instance_types is not None:
            data['recommendedInstanceTypes'] = list(self.recommended_instance_types)
        if self.notes is not None:
            data['notes'] = self.notes
        return data


def _profiles_from_dict(data: Optional[Dict[str, Any]]) -> Mapping[str, Profile]:
    return freeze_mapping({
        name: Profile.from_dict(name, profile) for name, profile in (data or {}).items()
    })


@dataclass(frozen=True)
class FrameworkEntry:
    """Capability record for one (framework, version) pair."""
    framework: str
    version: str
    base_image: str
    accelerator: AcceleratorSpec
    inference_ami_version: str
    recommended_instance_types: Tuple[str, ...]
    validation_level: ValidationLevel = ValidationLevel.UNKNOWN
    env_vars: Mapping[str, str] = field(default_factory=freeze_mapping)
    profiles: Mapping[str, Profile] = field(default_factory=freeze_mapping)
    notes: Optional[str] = None
    applied_profile: Optional[str] = None

    @property
    def key(self) -> str:
        return f"{self.framework}@{self.version}"

    @classmethod
    def from_dict(cls, framework: str, version: str, data: Dict[str, Any]) -> 'FrameworkEntry':
        return cls(
            framework=framework,
            version=version,
            base_image=data['baseImage'],
            accelerator=AcceleratorSpec.from_dict(data['accelerator']),
            inference_ami_version=data['inferenceAmiVersion'],
            recommended_instance_types=tuple(data['recommendedInstanceTypes']),
            validation_level=ValidationLevel(data.get('validationLevel', 'unknown')),
            env_vars=freeze_mapping(data.get('envVars')),
            profiles=_profiles_from_dict(data.get('profiles')),
            notes=data.get('notes'),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'baseImage': self.base_image,
            'accelerator': self.accelerator.to_dict(),
            'envVars': dict(self.env_vars),
            'inferenceAmiVersion': self.inference_ami_version,
            'recommendedInstanceTypes': list(self.recommended_instance_types),
            'validationLevel': self.validation_level.value,
        }
        if self.profiles:
            data['profiles'] = {name: p.to_dict() for name, p in self.profiles.items()}
        if self.notes is not None:
            data['notes'] = self.notes
        return data


@dataclass(frozen=True)
class ModelEntry:
    """Model record, keyed by an exact model id or a wildcard pattern."""
    key: str
    family: str
    chat_template: Optional[str]
    requires_template: bool
    validation_level: ValidationLevel
    framework_compatibility: Mapping[str, str] = field(default_factory=freeze_mapping)
    profiles: Mapping[str, Profile] = field(default_factory=freeze_mapping)
    env_vars: Mapping[str, str] = field(default_factory=freeze_mapping)
    recommended_instance_types: Optional[Tuple[str, ...]] = None
    notes: Optional[str] = None
    applied_profile: Optional[str] = None

    @property
    def is_pattern(self) -> bool:
        return '*' in self.key

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> 'ModelEntry':
        return cls(
            key=key,
            family=data['family'],
            chat_template=data.get('chatTemplate'),
            requires_template=data['requiresTemplate'],
            validation_level=ValidationLevel(data['validationLevel']),
            # Range strings such as ">=0.3.0" are kept as declared and not evaluated
            framework_compatibility=freeze_mapping(data.get('frameworkCompatibility')),
            profiles=_profiles_from_dict(data.get('profiles')),
            env_vars=freeze_mapping(data.get('envVars')),
            recommended_instance_types=_tuple_or_none(data.get('recommendedInstanceTypes')),
            notes=data.get('notes'),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'family': self.family,
            'chatTemplate': self.chat_template,
            'requiresTemplate': self.requires_template,
            'validationLevel': self.validation_level.value,
            'frameworkCompatibility': dict(self.framework_compatibility),
        }
        if self.env_vars:
            data['envVars'] = dict(self.env_vars)
        if self.recommended_instance_types is not None:
            data['recommendedInstanceTypes'] = list(self.recommended_instance_types)
        if self.profiles:
            data['profiles'] = {name: p.to_dict() for name, p in self.profiles.items()}
        if self.notes is not None:
            data['notes'] = self.notes
        return data


@dataclass(frozen=True)
class InstanceAccelerator:
    """Accelerator hardware fitted to an instance type."""
    type: AcceleratorType
    hardware: str
    architecture: str
    versions: Optional[Tuple[str, ...]] = None
    default: Optional[str] = None

    def supports_version(self, version: Optional[str]) -> Optional[bool]:
        """None when either side does not declare versions."""
        if version is None or self.versions is None:
            return None
        return version in self.versions


@dataclass(frozen=True)
class InstanceEntry:
    """Capability record for an instance type such as ``ml.g5.xlarge``."""
    instance_type: str
    family: str
    accelerator: InstanceAccelerator
    memory: str
    vcpus: int
    notes: Optional[str] = None

    @property
    def key(self) -> str:
        return self.instance_type

    @classmethod
    def from_dict(cls, instance_type: str, data: Dict[str, Any]) -> 'InstanceEntry':
        accelerator = data['accelerator']
        return cls(
            instance_type=instance_type,
            family=data['family'],
            accelerator=InstanceAccelerator(
                type=AcceleratorType(accelerator['type']),
                hardware=accelerator['hardware'],
                architecture=accelerator['architecture'],
                versions=_tuple_or_none(accelerator.get('versions')),
                default=accelerator.get('default'),
            ),
            memory=data['memory'],
            vcpus=data['vcpus'],
            notes=data.get('notes'),
        )
