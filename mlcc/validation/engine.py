"""
Environment variable validation engine.
"""

from typing import Any, List, Mapping, Optional

from mlcc.config.system.settings import ValidationOptions
from mlcc.logger import get_mlcc_logger
from .base import FrameworkContext, ValidationResult, ValidationStrategy
from .community_reports import CommunityReportsStrategy
from .known_flags import KnownFlagsStrategy


class ValidationEngine:
    """
    Runs the registered validation strategies over an environment variable map.

    Strategies run sequentially in registration order. A strategy runs when
    its option is enabled and it has data for the framework; every strategy
    that ran is listed in ``ValidationResult.strategies_used``.

    Parameters
    ----------
    strategies : List[ValidationStrategy], optional
        Strategies in the order they should run
    """

    def __init__(self, strategies: Optional[List[ValidationStrategy]] = None):
        self.logger = get_mlcc_logger().bind(component="ValidationEngine")
        self._strategies: List[ValidationStrategy] = []
        for strategy in strategies or []:
            self.register_strategy(strategy)

    @classmethod
    def from_store(cls, store) -> 'ValidationEngine':
        """Engine with the built-in strategies reading the store's tables."""
        return cls([
            KnownFlagsStrategy(store.known_flags),
            CommunityReportsStrategy(store.community_reports),
        ])

    @property
    def strategies(self) -> List[ValidationStrategy]:
        return list(self._strategies)

    def register_strategy(self, strategy: ValidationStrategy):
        if not isinstance(strategy, ValidationStrategy):
            raise TypeError(f"{type(strategy).__name__} is not a ValidationStrategy")
        if any(s.name == strategy.name for s in self._strategies):
            raise ValueError(f"Strategy '{strategy.name}' is already registered")
        self._strategies.append(strategy)

    def validate_environment_variables(self, env_vars: Mapping[str, str], framework_config: Any,
                                       options: Optional[ValidationOptions] = None) -> ValidationResult:
        """
        Validate environment variables for a framework.

        Parameters
        ----------
        env_vars : Mapping[str, str]
            Effective environment variable map
        framework_config : FrameworkContext, Mapping or FrameworkEntry
            Framework name and version, optionally with inline flag or
            report tables
        options : ValidationOptions, optional
            Engine switches; all on when omitted

        Returns
        -------
        ValidationResult
            Empty, with no strategy run, when validation is disabled
        """
        options = options or ValidationOptions()
        result = ValidationResult()
        if not options.enabled:
            return result

        context = FrameworkContext.from_config(framework_config)
        env_vars = env_vars or {}

        for strategy in self._strategies:
            if not options.is_enabled(strategy.option):
                continue
            if not strategy.has_data(context):
                self.logger.debug("Strategy has no data", strategy=strategy.name,
                                  framework=context.framework, version=context.version)
                continue
            result.add(strategy.validate(context, env_vars))

        self.logger.info(
            "Environment variables validated",
            framework=context.framework,
            version=context.version,
            variables=len(env_vars),
            errors=len(result.errors),
            warnings=len(result.warnings),
            strategies=result.strategies_used,
        )
        return result
