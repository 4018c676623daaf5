"""
Collection of explicit (non-interactive) configuration.
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from mlcc.config.core.provider import (
    ConfigProvider, EnvironmentConfigProvider, FileConfigProvider, RuntimeConfigProvider
)
from mlcc.core.exceptions import ConfigurationError, ValidationError
from mlcc.logger import get_mlcc_logger
from .matrix import PARAMETER_MATRIX, validate_parameter_value

logger = get_mlcc_logger().bind(component="ExplicitConfiguration")


def environment_provider(environ: Optional[Mapping[str, str]] = None) -> EnvironmentConfigProvider:
    """Environment provider for every parameter that declares an environment variable."""
    variables = {name: spec.env_var for name, spec in PARAMETER_MATRIX.items() if spec.env_var}
    return EnvironmentConfigProvider(variables, environ=environ)


def default_providers(config_file: Optional[str] = None,
                      cli_options: Optional[Dict[str, Any]] = None,
                      environ: Optional[Mapping[str, str]] = None) -> list:
    """Providers in precedence order, lowest first: config file, environment, CLI options."""
    providers = []
    if config_file:
        providers.append(FileConfigProvider(config_file))
    providers.append(environment_provider(environ))
    providers.append(RuntimeConfigProvider("cli", cli_options or {}))
    return providers


def collect_explicit_configuration(providers: Iterable[ConfigProvider],
                                   validate: bool = True) -> Dict[str, Any]:
    """
    Merge provider values into the explicit configuration of a run.

    Later providers win. ``None`` values are skipped so they never mask a
    lower source. Keys that are unknown, or that the parameter matrix does not
    accept from the provider's source, are ignored.

    Raises
    ------
    ConfigurationError
        If a config file is unreadable or a supplied value is invalid
    """
    explicit: Dict[str, Any] = {}

    for provider in providers:
        for name, raw in provider.get_config().items():
            spec = PARAMETER_MATRIX.get(name)
            if spec is None:
                logger.debug("Ignoring unknown parameter", parameter=name, source=provider.source)
                continue
            if not spec.supports_source(provider.source):
                logger.debug("Parameter not accepted from source", parameter=name, source=provider.source)
                continue
            if raw is None:
                continue
            try:
                explicit[name] = spec.coerce(raw)
            except ValidationError as e:
                raise ConfigurationError(name, str(raw), str(e)) from e

    if validate:
        for name, value in explicit.items():
            try:
                validate_parameter_value(name, value, explicit)
            except ValidationError as e:
                raise ConfigurationError(name, str(value), str(e)) from e

    return explicit
