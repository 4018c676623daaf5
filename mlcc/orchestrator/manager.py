"""
Configuration manager.

Drives a configuration run: resolves parameters phase by phase, merges the
registry layers for the selected framework and model, checks the instance
type and validates the effective environment variables. A blocking finding
that the user does not confirm ends the run with UserAbort before anything
is generated.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from mlcc import logger as run_logger
from mlcc.config.parameters import (
    PARAMETER_MATRIX, ParameterResolver, ResolvedParameter, has_value, parameters_for_phase,
    resolved_values, validate_parameter_value
)
from mlcc.config.system import EngineSettings
from mlcc.core.enums import Phase
from mlcc.core.exceptions import CompatibilityError, ConfigurationError, UserAbort, ValidationError
from mlcc.logger import get_mlcc_logger
from mlcc.metadata import HuggingFaceClient
from mlcc.registry import RegistryStore, apply_profile, list_profiles, load_registry_store
from mlcc.registry.entries import FrameworkEntry
from mlcc.registry.export import should_offer_export
from mlcc.registry.merge import MergedConfiguration, merge_configurations
from mlcc.validation import (
    CompatibilityValidator, CompatibilityVerdict, FrameworkContext, ValidationEngine, ValidationResult
)
from .events import EventSink, LoggerEventSink
from .prompter import NonInteractivePrompter, Prompter, Question

MetadataFetcher = Callable[[str], Optional[Dict[str, Any]]]

PHASES = (Phase.CORE, Phase.MODULES, Phase.INFRASTRUCTURE, Phase.PROJECT)


@dataclass
class RunOutcome:
    """Everything a configuration run decided."""
    parameters: Dict[str, ResolvedParameter]
    configuration: MergedConfiguration
    compatibility: Optional[CompatibilityVerdict] = None
    validation: ValidationResult = field(default_factory=ValidationResult)

    @property
    def values(self) -> Dict[str, Any]:
        return resolved_values(self.parameters)

    @property
    def env_vars(self) -> Dict[str, str]:
        return dict(self.configuration.env_vars)

    @property
    def offer_export(self) -> bool:
        return should_offer_export(self.configuration)


class ConfigurationManager:
    """
    Orchestrates a configuration run.

    Parameters
    ----------
    store : RegistryStore, optional
        Loaded registries; loaded from ``settings.registry_dir`` when omitted
    settings : EngineSettings, optional
        Engine settings; defaults when omitted
    prompter : Prompter, optional
        Source of interactive answers; a NonInteractivePrompter by default
    events : EventSink, optional
        Receives user-facing messages; logged by default
    metadata_fetcher : callable, optional
        ``fetch(model_id) -> dict | None``; a HuggingFaceClient by default.
        Any exception it raises is treated as "metadata unavailable".
    validation_engine : ValidationEngine, optional
        Defaults to the built-in strategies over the store's tables
    """

    def __init__(self, store: Optional[RegistryStore] = None,
                 settings: Optional[EngineSettings] = None,
                 prompter: Optional[Prompter] = None,
                 events: Optional[EventSink] = None,
                 metadata_fetcher: Optional[MetadataFetcher] = None,
                 validation_engine: Optional[ValidationEngine] = None):
        self.settings = settings or EngineSettings()
        self.store = store or load_registry_store(self.settings.registry_dir)
        self.prompter = prompter or NonInteractivePrompter()
        self.events = events or LoggerEventSink()
        self.metadata_fetcher = metadata_fetcher or HuggingFaceClient.from_settings(self.settings)
        self.validation_engine = validation_engine or ValidationEngine.from_store(self.store)
        self.compatibility_validator = CompatibilityValidator(self.store)
        self.resolver = ParameterResolver()
        self.logger = get_mlcc_logger().bind(component="ConfigurationManager")

    # ------------------------------------------------------------------
    # Registry operations
    # ------------------------------------------------------------------

    def fetch_model_metadata(self, model_id: str) -> Optional[Dict[str, Any]]:
        """Model metadata from the external source, or None when it is unavailable for any reason."""
        if self.settings.offline:
            return None
        try:
            return self.metadata_fetcher(model_id)
        except Exception as e:
            self.logger.info("Model metadata unavailable, using registry data only",
                             model_id=model_id, error=str(e))
            return None

    def framework_entry(self, framework: Optional[str], version: Optional[str],
                        profile: Optional[str] = None) -> Optional[FrameworkEntry]:
        """Framework record with ``profile`` applied, or None when the pair is not registered."""
        entry = self.store.get_framework(framework, version)
        if entry is None:
            return None
        return apply_profile(entry, profile)

    def match_configuration(self, framework: Optional[str], version: Optional[str],
                            model_id: Optional[str] = None,
                            framework_profile: Optional[str] = None,
                            model_profile: Optional[str] = None) -> MergedConfiguration:
        """
        Merge framework, profile, model metadata and model registry data.

        Raises
        ------
        ProfileNotFoundError
            If a named profile is not declared on the matched entry
        """
        framework_entry = self.store.get_framework(framework, version)
        if framework_entry is None:
            self.logger.warning("No framework registry entry", framework=framework, version=version)

        model_match = None
        model_metadata = None
        if model_id:
            model_metadata = self.fetch_model_metadata(model_id)
            model_match = self.store.match_model(model_id)

        merged = merge_configurations(
            framework=framework,
            version=version,
            model_id=model_id,
            framework_entry=framework_entry,
            framework_profile=framework_profile if framework_entry else None,
            model_metadata=model_metadata,
            model_match=model_match,
            model_profile=model_profile if model_match else None,
        )

        self.logger.info(
            "Configuration matched",
            framework=framework,
            version=version,
            model_id=model_id,
            sources=merged.source_names,
            validation_level=merged.validation_level.value,
            match_type=merged.match_type.value if merged.match_type else None,
        )
        return merged

    def validate_instance_type(self, instance_type: str,
                               framework_entry: FrameworkEntry) -> CompatibilityVerdict:
        return self.compatibility_validator.validate_instance_type(instance_type, framework_entry)

    def validate_environment_variables(self, env_vars: Mapping[str, str],
                                       framework_config: Any) -> ValidationResult:
        return self.validation_engine.validate_environment_variables(
            env_vars, framework_config, self.settings.validation_options()
        )

    # ------------------------------------------------------------------
    # Configuration run
    # ------------------------------------------------------------------

    def _choices(self, name: str, values: Mapping[str, Any]) -> Optional[List[str]]:
        if name == 'framework':
            return self.store.list_frameworks()
        if name == 'framework_version':
            framework = values.get('framework')
            return self.store.list_versions(framework) if framework else None
        if name == 'framework_profile':
            entry = self.store.get_framework(values.get('framework'), values.get('framework_version'))
            return list_profiles(entry) if entry else None
        if name == 'model_profile':
            entry = self.store.get_model(values.get('model_name'))
            return list_profiles(entry) if entry else None
        if name == 'instance_type':
            entry = self.store.get_framework(values.get('framework'), values.get('framework_version'))
            return self.compatibility_validator.compatible_instance_types(entry) if entry else None
        spec = PARAMETER_MATRIX[name]
        return list(spec.choices) if spec.choices else None

    def _questions(self, names: List[str], explicit: Mapping[str, Any],
                   prior_run: Mapping[str, Any], values: Dict[str, Any]) -> List[Question]:
        # Values this phase already has without asking narrow the choices
        known = dict(values)
        for name in names:
            for source in (prior_run, explicit):
                if has_value(source, name):
                    known[name] = source[name]

        return [
            Question(
                name=name,
                message=PARAMETER_MATRIX[name].message,
                default=self.resolver.prompt_default(name, prior_run, known),
                choices=self._choices(name, known),
            )
            for name in self.resolver.prompt_plan(names, explicit, prior_run)
        ]

    def _resolve_phase(self, phase: Phase, explicit: Mapping[str, Any], prior_run: Mapping[str, Any],
                       resolved: Dict[str, ResolvedParameter], skip_prompts: bool):
        names = parameters_for_phase(phase)
        values = resolved_values(resolved)

        answers: Dict[str, Any] = {}
        questions = [] if skip_prompts else self._questions(names, explicit, prior_run, values)
        if questions:
            answers = self.prompter.ask(phase, questions, values) or {}

        for name in names:
            spec = PARAMETER_MATRIX[name]
            parameter = self.resolver.resolve(
                name, explicit, prior_run, answers,
                default_fn=lambda s=spec: s.compute_default(values)
            )
            try:
                validate_parameter_value(name, parameter.value, values)
            except ValidationError as e:
                raise ConfigurationError(name, str(parameter.value), str(e)) from e
            resolved[name] = parameter
            values[name] = parameter.value

        for name in names:
            if PARAMETER_MATRIX[name].required and values.get(name) is None:
                raise ConfigurationError(name, None, "required parameter has no value")

        self.logger.debug("Phase resolved", phase=phase.value,
                          prompted=[q.name for q in questions])

    def _check_compatibility(self, values: Mapping[str, Any]) -> Optional[CompatibilityVerdict]:
        framework_entry = self.framework_entry(
            values.get('framework'), values.get('framework_version'), values.get('framework_profile')
        )
        instance_type = values.get('instance_type')
        if framework_entry is None or not instance_type:
            return None

        verdict = self.validate_instance_type(instance_type, framework_entry)
        if verdict.info:
            self.events.info(verdict.info, instance_type=instance_type)
        if verdict.warning:
            self.events.warn(verdict.warning, instance_type=instance_type)

        if not verdict.compatible:
            self.events.error(verdict.error, instance_type=instance_type,
                              recommendations=list(verdict.recommendations))
            if not self.prompter.confirm(f"{verdict.error}. Continue anyway?", default=False):
                raise CompatibilityError(instance_type, verdict.error, verdict.recommendations)
            self.logger.warning("Continuing with incompatible instance type", instance_type=instance_type)

        return verdict

    def _check_environment(self, configuration: MergedConfiguration) -> ValidationResult:
        context = FrameworkContext(configuration.framework, configuration.version)
        result = self.validate_environment_variables(configuration.env_vars, context)

        for finding in result.warnings:
            self.events.warn(finding.message, key=finding.key, source=finding.source)
        for finding in result.errors:
            self.events.error(finding.message, key=finding.key, source=finding.source)

        if result.errors and not self.prompter.confirm(
                f"{len(result.errors)} environment variable error(s) found. Continue anyway?", default=False):
            raise UserAbort("Environment variable validation failed", findings=result.errors)

        return result

    def run(self, explicit_config: Optional[Mapping[str, Any]] = None,
            prior_run_config: Optional[Mapping[str, Any]] = None) -> RunOutcome:
        """
        Run the configuration phases.

        Parameters
        ----------
        explicit_config : Mapping, optional
            Values from CLI options, environment variables and config files
        prior_run_config : Mapping, optional
            Values carried over from a previous run

        Returns
        -------
        RunOutcome
            Resolved parameters, merged configuration and findings

        Raises
        ------
        CompatibilityError
            If the instance type is incompatible and the user declines to continue
        UserAbort
            If environment variable errors are found and the user declines to continue
        ConfigurationError
            If a resolved parameter value is invalid or a required parameter has no value
        ProfileNotFoundError
            If a selected profile does not exist
        """
        explicit = dict(explicit_config or {})
        prior_run = dict(prior_run_config or {})
        skip_prompts = bool(explicit.get('skip_prompts'))

        resolved: Dict[str, ResolvedParameter] = {}
        configuration: Optional[MergedConfiguration] = None
        verdict: Optional[CompatibilityVerdict] = None

        try:
            for phase in PHASES:
                self._resolve_phase(phase, explicit, prior_run, resolved, skip_prompts)
                values = resolved_values(resolved)

                if phase is Phase.CORE:
                    configuration = self.match_configuration(
                        values.get('framework'),
                        values.get('framework_version'),
                        model_id=values.get('model_name'),
                        framework_profile=values.get('framework_profile') or None,
                        model_profile=values.get('model_profile') or None,
                    )
                    # Every later log line of the run carries the selection
                    run_logger.bind(framework=configuration.framework,
                                    framework_version=configuration.version,
                                    model_id=configuration.model_id)
                    self.events.info(
                        f"Configuration sources: {', '.join(configuration.source_names)}",
                        validation_level=configuration.validation_level.value,
                    )
                elif phase is Phase.INFRASTRUCTURE:
                    verdict = self._check_compatibility(values)

            validation = self._check_environment(configuration)
        finally:
            run_logger.unbind('framework', 'framework_version', 'model_id')

        self.logger.info(
            "Configuration run complete",
            framework=configuration.framework,
            version=configuration.version,
            instance_type=resolved['instance_type'].value,
            errors=len(validation.errors),
            warnings=len(validation.warnings),
        )
        return RunOutcome(
            parameters=resolved,
            configuration=configuration,
            compatibility=verdict,
            validation=validation,
        )
