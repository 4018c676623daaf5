"""
Registry-related enums.
"""

from enum import Enum


class AcceleratorType(Enum):
    """Accelerator families an image or an instance can target."""
    CUDA = "cuda"
    NEURON = "neuron"
    CPU = "cpu"
    ROCM = "rocm"


class ValidationLevel(Enum):
    """How well a registry configuration has been exercised."""
    TESTED = "tested"
    COMMUNITY_VALIDATED = "community-validated"
    EXPERIMENTAL = "experimental"
    UNKNOWN = "unknown"


class MatchType(Enum):
    """How a registry key was matched."""
    EXACT = "exact"
    PATTERN = "pattern"


class ConfigSource(Enum):
    """Layers that contribute to a merged configuration."""
    FRAMEWORK_REGISTRY = "Framework_Registry"
    FRAMEWORK_PROFILE = "Framework_Profile"
    HUGGINGFACE_HUB = "HuggingFace_Hub_API"
    MODEL_REGISTRY = "Model_Registry"
    MODEL_PROFILE = "Model_Profile"
    DEFAULT = "Default"
