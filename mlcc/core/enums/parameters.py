"""
Parameter resolution enums.
"""

from enum import Enum


class ParameterOrigin(Enum):
    """Where a resolved parameter value came from."""
    EXPLICIT = "explicit"
    PRIOR_RUN = "prior-run"
    PROMPTED = "prompted"
    DEFAULT = "default"


class Phase(Enum):
    """Sequential prompting phases of a configuration run."""
    CORE = "core"
    MODULES = "modules"
    INFRASTRUCTURE = "infrastructure"
    PROJECT = "project"


class DeployTarget(Enum):
    """Deployment targets a generated project can use."""
    SAGEMAKER = "sagemaker"
    CODEBUILD = "codebuild"
