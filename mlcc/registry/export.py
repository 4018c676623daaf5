"""
Configuration export.

Turns a merged configuration that was tested by a user into a registry entry
that can be contributed back, together with submission instructions.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

import yaml

from mlcc import __version__
from mlcc.core.enums import ConfigSource, ValidationLevel
from .merge import MergedConfiguration

EXPORTABLE_LEVELS = (ValidationLevel.EXPERIMENTAL, ValidationLevel.UNKNOWN)

# Ordered; "llama-2" must be tried before "llama"
KNOWN_FAMILIES = ('llama-2', 'llama-3', 'llama', 'mistral', 'mixtral', 'gemma', 'phi', 'qwen')

PLACEHOLDER_ACCELERATOR = {
    'type': 'cuda',
    'version': '12.1',
    'versionRange': {'min': '12.0', 'max': '12.2'},
}

REGISTRY_FILES = {
    'framework': 'mlcc/registry/data/frameworks.yaml',
    'model': 'mlcc/registry/data/models.yaml',
}

REGISTRY_NAMES = {
    'framework': 'Framework_Registry',
    'model': 'Model_Registry',
}


@dataclass
class DeploymentReport:
    """What the user observed when running the configuration."""
    testing_notes: str = ''
    instance_type: Optional[str] = None
    deployment_success: bool = False
    inference_success: bool = False
    tester_name: str = 'Anonymous'


@dataclass
class ExportResult:
    registry_type: str
    entry: Dict[str, Any]
    submission_text: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def entry_yaml(self) -> str:
        return render_entry(self.entry)


def should_offer_export(config: MergedConfiguration) -> bool:
    """Only configurations that are not yet validated are worth contributing."""
    return config.validation_level in EXPORTABLE_LEVELS


def determine_registry_type(config: MergedConfiguration) -> str:
    if config.model_id and (config.chat_template or ConfigSource.MODEL_REGISTRY in config.config_sources):
        return 'model'
    return 'framework'


def determine_validation_level(testing: DeploymentReport) -> ValidationLevel:
    if testing.deployment_success and testing.inference_success:
        return ValidationLevel.COMMUNITY_VALIDATED
    if testing.deployment_success:
        return ValidationLevel.EXPERIMENTAL
    return ValidationLevel.UNKNOWN


def extract_model_family(model_id: Optional[str]) -> str:
    """
    Guess a model family from a model id.

    ``meta-llama/Llama-2-7b-chat-hf`` gives ``llama-2``; ids matching no known
    family give the first dash-separated part of the model name.
    """
    if not model_id:
        return 'unknown'
    model_name = model_id.lower().split('/')[-1]
    for family in KNOWN_FAMILIES:
        if family in model_name:
            return family
    return model_name.split('-')[0]


def create_testing_notes(testing: DeploymentReport, today: Optional[date] = None) -> str:
    today = today or date.today()
    notes = []
    if testing.testing_notes:
        notes.append(testing.testing_notes)
    if testing.instance_type:
        notes.append(f"Tested on {testing.instance_type}")
    if testing.deployment_success and testing.inference_success:
        notes.append("✓ Deployment and inference successful")
    elif testing.deployment_success:
        notes.append("✓ Deployment successful, inference not tested")
    if testing.tester_name and testing.tester_name != 'Anonymous':
        notes.append(f"Tested by: {testing.tester_name}")
    notes.append(f"Exported: {today.isoformat()}")
    return '. '.join(notes)


def _framework_entry(config: MergedConfiguration, testing: DeploymentReport, notes: str) -> Dict[str, Any]:
    if config.recommended_instance_types:
        recommended = list(config.recommended_instance_types)
    elif testing.instance_type:
        recommended = [testing.instance_type]
    else:
        recommended = ['ml.g5.xlarge']

    return {
        config.version: {
            'baseImage': config.base_image or 'REPLACE_WITH_BASE_IMAGE',
            'accelerator': config.accelerator.to_dict() if config.accelerator else dict(PLACEHOLDER_ACCELERATOR),
            'envVars': dict(config.env_vars),
            'inferenceAmiVersion': config.inference_ami_version or 'REPLACE_WITH_AMI_VERSION',
            'recommendedInstanceTypes': recommended,
            'validationLevel': determine_validation_level(testing).value,
            'notes': notes,
        }
    }


def _model_entry(config: MergedConfiguration, testing: DeploymentReport, notes: str) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        'family': extract_model_family(config.model_id),
        'chatTemplate': config.chat_template or None,
        'requiresTemplate': bool(config.chat_template),
        'validationLevel': determine_validation_level(testing).value,
        'frameworkCompatibility': {config.framework: f">={config.version}"},
        'notes': notes,
    }
    if config.env_vars:
        entry['envVars'] = dict(config.env_vars)
    if config.recommended_instance_types:
        entry['recommendedInstanceTypes'] = list(config.recommended_instance_types)
    elif testing.instance_type:
        entry['recommendedInstanceTypes'] = [testing.instance_type]
    return {config.model_id: entry}


def render_entry(entry: Dict[str, Any]) -> str:
    return yaml.safe_dump(entry, sort_keys=False, default_flow_style=False, allow_unicode=True)


def _submission_text(registry_type: str, config: MergedConfiguration, entry: Dict[str, Any],
                     generator_version: str, today: date) -> str:
    registry_file = REGISTRY_FILES[registry_type]
    if registry_type == 'framework':
        subject_label, subject = 'Framework', config.framework
        title = f"{config.framework} {config.version}"
    else:
        subject_label, subject = 'Model', config.model_id
        title = config.model_id

    accelerator = config.accelerator
    accelerator_text = f"{accelerator.type.value} {accelerator.version or ''}".strip() if accelerator else 'Not specified'
    instance = config.recommended_instance_types[0] if config.recommended_instance_types else 'Not specified'

    lines = [
        "# Configuration Export for Community Contribution",
        "",
        "Thank you for testing this configuration! Your contribution helps the community.",
        "",
        "## Configuration Details",
        "",
        f"- **Registry Type**: {REGISTRY_NAMES[registry_type]}",
        f"- **{subject_label}**: {subject}",
        f"- **Validation Level**: {config.validation_level.value}",
        f"- **Tested On**: {today.isoformat()}",
        "",
        "## Submission Instructions",
        "",
        "### Option 1: GitHub Issue (Recommended)",
        "",
        f"1. Title: \"[Config] Add {title}\"",
        "2. Paste the configuration entry below",
        "3. Add any additional context about your testing",
        "",
        "### Option 2: Pull Request",
        "",
        "1. Fork the repository",
        f"2. Edit: `{registry_file}`",
        "3. Add the configuration entry to the appropriate section",
        f"4. Submit a pull request with title: \"Add {title} configuration\"",
        "",
        "## Configuration Entry",
        "",
        f"Add this to `{registry_file}`:",
        "",
        "```yaml",
        render_entry(entry).rstrip(),
        "```",
        "",
        "## Testing Information",
        "",
        f"- **Instance Type**: {instance}",
        f"- **Accelerator**: {accelerator_text}",
        f"- **Base Image**: {config.base_image or 'Not specified'}",
        f"- **AMI Version**: {config.inference_ami_version or 'Not specified'}",
        "",
        "## Notes",
        "",
        config.notes or "No additional notes",
        "",
        "---",
        "",
        f"Generated by mlcc v{generator_version}",
    ]
    return "\n".join(lines)


def export_configuration(config: MergedConfiguration, testing: Optional[DeploymentReport] = None,
                         generator_version: str = __version__, today: Optional[date] = None) -> ExportResult:
    """
    Export a merged configuration as a registry contribution.

    Parameters
    ----------
    config : MergedConfiguration
        Configuration that was tested
    testing : DeploymentReport, optional
        Testing outcome; nothing tested when omitted
    generator_version : str, optional
        Version reported in the submission text and metadata
    today : date, optional
        Export date

    Returns
    -------
    ExportResult
        Model registry entry when a model id with template or registry data
        is present, framework registry entry otherwise
    """
    testing = testing or DeploymentReport()
    today = today or date.today()

    registry_type = determine_registry_type(config)
    notes = create_testing_notes(testing, today)
    if registry_type == 'model':
        entry = _model_entry(config, testing, notes)
    else:
        entry = _framework_entry(config, testing, notes)

    metadata = {
        'generatorVersion': generator_version,
        'exportedAt': datetime.now(timezone.utc).isoformat(),
        'configSource': ', '.join(config.source_names) or 'Unknown',
        'validationLevel': config.validation_level.value,
        'testerName': testing.tester_name,
        'instanceType': testing.instance_type,
        'deploymentSuccess': testing.deployment_success,
        'inferenceSuccess': testing.inference_success,
    }

    return ExportResult(
        registry_type=registry_type,
        entry=entry,
        submission_text=_submission_text(registry_type, config, entry, generator_version, today),
        metadata=metadata,
    )
