"""
Parameter precedence resolution.

Each parameter value is taken from the highest-ranked source that has one:

    explicit configuration  >  prior-run configuration  >  prompted answer  >  default

A source "has" a value only when the key is present and not ``None``.
``False``, ``0`` and ``""`` are real values: they win over lower sources and
suppress the prompt for that parameter.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from mlcc.core.enums import ParameterOrigin
from mlcc.logger import get_mlcc_logger
from .matrix import PARAMETER_MATRIX, ParameterSpec


def has_value(source: Optional[Mapping[str, Any]], name: str) -> bool:
    """True when ``source`` carries a non-None value for ``name``."""
    return source is not None and source.get(name) is not None


@dataclass(frozen=True)
class ResolvedParameter:
    """A parameter value together with the source it was taken from."""
    name: str
    value: Any
    origin: ParameterOrigin
    promptable: bool

    def as_tuple(self):
        return self.value, self.origin


class ParameterResolver:
    """
    Resolves parameter values across ranked configuration sources.

    Promptability comes from the parameter matrix; parameters that are not
    promptable never take a value from prompted answers.
    """

    def __init__(self, matrix: Optional[Mapping[str, ParameterSpec]] = None):
        self.matrix = dict(matrix) if matrix is not None else dict(PARAMETER_MATRIX)
        self.logger = get_mlcc_logger().bind(component="ParameterResolver")

    def is_promptable(self, name: str) -> bool:
        spec = self.matrix.get(name)
        return spec is not None and spec.promptable

    def should_prompt(self, name: str,
                      explicit_config: Optional[Mapping[str, Any]],
                      prior_run_config: Optional[Mapping[str, Any]] = None) -> bool:
        """A parameter is asked only if promptable and no higher source has a value."""
        if not self.is_promptable(name):
            return False
        return not (has_value(explicit_config, name) or has_value(prior_run_config, name))

    def prompt_plan(self, names: Iterable[str],
                    explicit_config: Optional[Mapping[str, Any]],
                    prior_run_config: Optional[Mapping[str, Any]] = None) -> List[str]:
        return [name for name in names if self.should_prompt(name, explicit_config, prior_run_config)]

    def prompt_default(self, name: str,
                       prior_run_config: Optional[Mapping[str, Any]] = None,
                       context: Optional[Dict[str, Any]] = None) -> Any:
        """Default offered in a prompt: the prior-run value, else the matrix default."""
        if has_value(prior_run_config, name):
            return prior_run_config[name]
        spec = self.matrix.get(name)
        return spec.compute_default(context) if spec else None

    def resolve(self, name: str,
                explicit_config: Optional[Mapping[str, Any]],
                prior_run_config: Optional[Mapping[str, Any]] = None,
                prompted_answers: Optional[Mapping[str, Any]] = None,
                default_fn: Optional[Callable[[], Any]] = None) -> ResolvedParameter:
        """
        Resolve a single parameter.

        Parameters
        ----------
        name : str
            Parameter name
        explicit_config : Mapping
            Values from CLI options, environment variables and config files
        prior_run_config : Mapping, optional
            Values carried over from a previous run
        prompted_answers : Mapping, optional
            Values the user entered interactively
        default_fn : callable, optional
            Computes the fallback value; defaults to the matrix default

        Returns
        -------
        ResolvedParameter
        """
        promptable = self.is_promptable(name)

        if has_value(explicit_config, name):
            return ResolvedParameter(name, explicit_config[name], ParameterOrigin.EXPLICIT, promptable)

        if has_value(prior_run_config, name):
            return ResolvedParameter(name, prior_run_config[name], ParameterOrigin.PRIOR_RUN, promptable)

        if promptable and has_value(prompted_answers, name):
            return ResolvedParameter(name, prompted_answers[name], ParameterOrigin.PROMPTED, promptable)

        if default_fn is not None:
            value = default_fn()
        else:
            spec = self.matrix.get(name)
            value = spec.compute_default({}) if spec else None
        return ResolvedParameter(name, value, ParameterOrigin.DEFAULT, promptable)

    def resolve_all(self, explicit_config: Optional[Mapping[str, Any]],
                    prior_run_config: Optional[Mapping[str, Any]] = None,
                    prompted_answers: Optional[Mapping[str, Any]] = None,
                    names: Optional[Iterable[str]] = None) -> Dict[str, ResolvedParameter]:
        """
        Resolve parameters in matrix order.

        Computed defaults see every value resolved before them, so a generated
        project name can use the resolved framework.
        """
        resolved: Dict[str, ResolvedParameter] = {}
        values: Dict[str, Any] = {}

        for name in (names if names is not None else self.matrix.keys()):
            spec = self.matrix.get(name)
            default_fn = (lambda s=spec: s.compute_default(values)) if spec else (lambda: None)
            parameter = self.resolve(name, explicit_config, prior_run_config, prompted_answers, default_fn)
            resolved[name] = parameter
            values[name] = parameter.value

        self.logger.debug(
            "Parameters resolved",
            origins={name: p.origin.value for name, p in resolved.items()},
        )
        return resolved


def resolved_values(resolved: Mapping[str, ResolvedParameter]) -> Dict[str, Any]:
    return {name: parameter.value for name, parameter in resolved.items()}
