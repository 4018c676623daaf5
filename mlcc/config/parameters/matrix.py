"""
Parameter matrix.

Static description of every configuration parameter: which sources may
supply it, whether it can be asked interactively, its phase and its default.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, Optional, Tuple
import random
import re

from mlcc.core.enums import Phase, DeployTarget
from mlcc.core.exceptions import NotFoundError, ValidationError


AWS_REGIONS = (
    'us-east-1', 'us-east-2', 'us-west-1', 'us-west-2',
    'eu-west-1', 'eu-west-2', 'eu-central-1', 'eu-north-1',
    'ap-southeast-1', 'ap-southeast-2', 'ap-northeast-1',
    'ca-central-1', 'sa-east-1'
)

CODEBUILD_COMPUTE_TYPES = (
    'BUILD_GENERAL1_SMALL',
    'BUILD_GENERAL1_MEDIUM',
    'BUILD_GENERAL1_LARGE'
)

ROLE_ARN_PATTERN = re.compile(r'^arn:aws:iam::\d{12}:role/[\w+=,.@-]+$')
CODEBUILD_PROJECT_PATTERN = re.compile(r'^[a-zA-Z0-9][a-zA-Z0-9\-_]{1,254}$')

_ADJECTIVES = (
    'smart', 'fast', 'clever', 'bright', 'swift', 'agile', 'sharp', 'quick',
    'wise', 'keen', 'bold', 'sleek', 'neat', 'cool', 'fresh', 'prime'
)
_SUFFIXES = (
    'model', 'predictor', 'engine', 'service', 'api',
    'container', 'deployment', 'inference', 'ml', 'ai'
)


@dataclass(frozen=True)
class ParameterSpec:
    """Static attributes of a configuration parameter."""
    name: str
    phase: Phase
    message: str = ""
    cli_option: Optional[str] = None
    env_var: Optional[str] = None
    config_file: bool = True
    promptable: bool = True
    required: bool = False
    value_type: type = str
    default: Any = None
    default_factory: Optional[Callable[[Dict[str, Any]], Any]] = None
    choices: Optional[Tuple[str, ...]] = None

    def compute_default(self, context: Optional[Dict[str, Any]] = None) -> Any:
        """Default value, computed from already-resolved parameters when a factory is set."""
        if self.default_factory is not None:
            return self.default_factory(context or {})
        return self.default

    def supports_source(self, source: str) -> bool:
        if source == "cli":
            return self.cli_option is not None
        if source == "env":
            return self.env_var is not None
        if source == "config_file":
            return self.config_file
        return False

    def coerce(self, value: Any) -> Any:
        """Coerce a raw string value (environment, CLI) to the parameter type."""
        if value is None or not isinstance(value, str):
            return value
        if self.value_type is bool:
            lowered = value.strip().lower()
            if lowered in ('true', '1', 'yes', 'on'):
                return True
            if lowered in ('false', '0', 'no', 'off', ''):
                return False
            raise ValidationError(self.name, value, "expected a boolean")
        return value


def generate_project_name(framework: Optional[str] = None, rng: Optional[random.Random] = None) -> str:
    """Generate a readable project name such as ``swift-vllm-service``."""
    rng = rng or random
    adjective = rng.choice(_ADJECTIVES)
    suffix = rng.choice(_SUFFIXES)
    return f"{adjective}-{framework or 'ml'}-{suffix}"


def generate_codebuild_project_name(project_name: str, framework: Optional[str] = None,
                                    today: Optional[date] = None) -> str:
    """
    Build a CodeBuild project name from the project name.

    The result is lowercased, restricted to letters, digits, hyphens and
    underscores, and capped at 255 characters.
    """
    stamp = (today or date.today()).strftime('%Y%m%d')
    name = f"{project_name}-{framework or 'ml'}-build-{stamp}".lower()
    name = re.sub(r'[^a-z0-9\-_]', '-', name)
    name = re.sub(r'-+', '-', name).strip('-')
    return name[:255]


def _project_name_default(context: Dict[str, Any]) -> str:
    return generate_project_name(context.get('framework'))


def _codebuild_project_default(context: Dict[str, Any]) -> Optional[str]:
    if context.get('deploy_target') != DeployTarget.CODEBUILD.value:
        return None
    project_name = context.get('project_name') or generate_project_name(context.get('framework'))
    return generate_codebuild_project_name(project_name, context.get('framework'))


_SPECS = (
    # core
    ParameterSpec('framework', Phase.CORE, "Which inference framework?",
                  cli_option='framework', required=True),
    ParameterSpec('framework_version', Phase.CORE, "Which framework version?",
                  cli_option='framework-version', required=True),
    ParameterSpec('framework_profile', Phase.CORE, "Framework profile (leave empty for none)?",
                  cli_option='framework-profile'),
    ParameterSpec('model_name', Phase.CORE, "Which model should be served?",
                  cli_option='model-name', default='openai/gpt-oss-20b'),
    ParameterSpec('model_profile', Phase.CORE, "Model profile (leave empty for none)?",
                  cli_option='model-profile'),

    # modules
    ParameterSpec('include_sample_model', Phase.MODULES, "Include a sample model?",
                  cli_option='include-sample', required=True, value_type=bool, default=False),
    ParameterSpec('include_testing', Phase.MODULES, "Include test scripts?",
                  cli_option='include-testing', required=True, value_type=bool, default=True),

    # infrastructure
    ParameterSpec('instance_type', Phase.INFRASTRUCTURE, "Which instance type?",
                  cli_option='instance-type', env_var='ML_INSTANCE_TYPE', required=True),
    ParameterSpec('aws_region', Phase.INFRASTRUCTURE, "Which AWS region?",
                  cli_option='region', env_var='AWS_REGION', default='us-east-1', choices=AWS_REGIONS),
    ParameterSpec('aws_role_arn', Phase.INFRASTRUCTURE, "Execution role ARN (optional)?",
                  cli_option='role-arn', env_var='AWS_ROLE'),
    ParameterSpec('deploy_target', Phase.INFRASTRUCTURE, "Deployment target?",
                  cli_option='deploy-target', env_var='ML_DEPLOY_TARGET', required=True,
                  default=DeployTarget.SAGEMAKER.value,
                  choices=tuple(target.value for target in DeployTarget)),
    ParameterSpec('codebuild_compute_type', Phase.INFRASTRUCTURE, "CodeBuild compute type?",
                  cli_option='codebuild-compute-type', env_var='ML_CODEBUILD_COMPUTE_TYPE',
                  default='BUILD_GENERAL1_MEDIUM', choices=CODEBUILD_COMPUTE_TYPES),

    # project
    ParameterSpec('project_name', Phase.PROJECT, cli_option='project-name', promptable=False,
                  required=True, default_factory=_project_name_default),
    ParameterSpec('destination_dir', Phase.PROJECT, cli_option='project-dir', promptable=False,
                  required=True, default='.'),
    ParameterSpec('codebuild_project_name', Phase.PROJECT, promptable=False,
                  default_factory=_codebuild_project_default),
    ParameterSpec('skip_prompts', Phase.PROJECT, cli_option='skip-prompts', config_file=False,
                  promptable=False, value_type=bool, default=False),
)

PARAMETER_MATRIX: Dict[str, ParameterSpec] = {spec.name: spec for spec in _SPECS}


def get_parameter_spec(name: str) -> ParameterSpec:
    try:
        return PARAMETER_MATRIX[name]
    except KeyError:
        raise NotFoundError("Parameter", identifier=name) from None


def is_promptable(name: str) -> bool:
    spec = PARAMETER_MATRIX.get(name)
    return spec is not None and spec.promptable


def parameters_for_phase(phase: Phase) -> list:
    return [spec.name for spec in _SPECS if spec.phase is phase]


def validate_parameter_value(name: str, value: Any, context: Optional[Dict[str, Any]] = None):
    """
    Check a single parameter value.

    Raises
    ------
    ValidationError
        If the value is not acceptable for the parameter
    """
    if value is None or value == "":
        return

    spec = get_parameter_spec(name)

    if spec.choices and value not in spec.choices:
        raise ValidationError(name, value, f"supported values: {', '.join(spec.choices)}")

    if name == 'aws_role_arn' and not ROLE_ARN_PATTERN.match(value):
        raise ValidationError(
            name, value, "expected format arn:aws:iam::123456789012:role/RoleName"
        )

    if name == 'codebuild_project_name' and not CODEBUILD_PROJECT_PATTERN.match(value):
        raise ValidationError(
            name, value,
            "must be 2-255 characters, start with a letter or number, and contain only "
            "letters, numbers, hyphens and underscores"
        )
