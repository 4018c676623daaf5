"""
Instance type compatibility.

Decides whether an instance type can run a framework image, based on the
accelerator the image was built for and the hardware fitted to the instance.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from mlcc.logger import get_mlcc_logger
from mlcc.registry.entries import FrameworkEntry
from mlcc.registry.store import RegistryStore


@dataclass(frozen=True)
class CompatibilityVerdict:
    """
    Outcome of an instance type check.

    ``compatible`` False is blocking; ``warning`` and ``info`` are advisory.
    """
    compatible: bool
    instance_type: Optional[str] = None
    error: Optional[str] = None
    warning: Optional[str] = None
    info: Optional[str] = None
    recommendations: List[str] = field(default_factory=list)

    @property
    def is_blocking(self) -> bool:
        return not self.compatible

    def to_dict(self):
        return {
            'compatible': self.compatible,
            'error': self.error,
            'warning': self.warning,
            'info': self.info,
            'recommendations': list(self.recommendations),
        }


class CompatibilityValidator:
    """
    Checks instance types against framework accelerator requirements.

    Parameters
    ----------
    store : RegistryStore
        Loaded registries
    """

    def __init__(self, store: RegistryStore):
        self.store = store
        self.logger = get_mlcc_logger().bind(component="CompatibilityValidator")

    def validate_instance_type(self, instance_type: str, framework_entry: FrameworkEntry) -> CompatibilityVerdict:
        """
        Check an instance type against a framework entry.

        Parameters
        ----------
        instance_type : str
            Instance type, e.g. ``ml.g5.xlarge``
        framework_entry : FrameworkEntry
            Framework record, with any profile already applied

        Returns
        -------
        CompatibilityVerdict
            Incompatible for an unknown instance type or an accelerator type
            mismatch; compatible otherwise, with a warning when the
            accelerator version is not among those the instance supports
        """
        recommended = list(framework_entry.recommended_instance_types or [])
        required = framework_entry.accelerator
        instance = self.store.get_instance(instance_type)

        if instance is None:
            self.logger.warning("Unknown instance type", instance_type=instance_type,
                                framework=framework_entry.key)
            return CompatibilityVerdict(
                compatible=False,
                instance_type=instance_type,
                error=f"Unknown instance type '{instance_type}': not found in the instance registry",
                recommendations=recommended,
            )

        provided = instance.accelerator
        if provided.type is not required.type:
            self.logger.warning("Accelerator type mismatch", instance_type=instance_type,
                                framework=framework_entry.key,
                                required=required.type.value, provided=provided.type.value)
            return CompatibilityVerdict(
                compatible=False,
                instance_type=instance_type,
                error=(f"Accelerator type mismatch: {framework_entry.framework} {framework_entry.version} "
                       f"requires {required.type.value}, but {instance_type} provides "
                       f"{provided.type.value} ({provided.hardware})"),
                recommendations=recommended,
            )

        supported = provided.supports_version(required.version)
        if supported is False:
            warning = (f"{required.type.value} {required.version} required by {framework_entry.framework} "
                       f"{framework_entry.version} is not among the versions supported by {instance_type} "
                       f"({', '.join(provided.versions)})")
            version_range = required.version_range
            if version_range is not None:
                in_range = [v for v in provided.versions if version_range.contains(v)]
                if in_range:
                    warning += (f"; {', '.join(in_range)} falls within the image's accepted range "
                                f"{version_range.min} to {version_range.max}")
                else:
                    warning += (f"; none falls within the image's accepted range "
                                f"{version_range.min} to {version_range.max}")
            return CompatibilityVerdict(
                compatible=True,
                instance_type=instance_type,
                warning=f"{warning}; the container may not start",
                recommendations=recommended,
            )

        if supported is None:
            info = (f"{instance_type} provides {provided.type.value} ({provided.hardware}); "
                    f"accelerator version compatibility was not checked")
        else:
            info = (f"{instance_type} provides {provided.type.value} {required.version} "
                    f"on {provided.hardware}")
        return CompatibilityVerdict(compatible=True, instance_type=instance_type, info=info)

    def compatible_instance_types(self, framework_entry: FrameworkEntry) -> List[str]:
        """Instance types whose accelerator type matches the framework's, in registry order."""
        return [
            instance.instance_type
            for instance in self.store.instances_for_accelerator(framework_entry.accelerator.type)
        ]
