"""
Validation results and the strategy interface.

Findings are data: a strategy never raises for a bad environment variable,
it returns a ValidationFinding describing it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from mlcc.core.enums import Severity
from mlcc.logger import get_mlcc_logger


@dataclass(frozen=True)
class ValidationFinding:
    """A warning or error about a single environment variable."""
    key: str
    message: str
    severity: Severity = Severity.WARNING
    source: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {'key': self.key, 'message': self.message, 'severity': self.severity.value, 'source': self.source}


@dataclass
class StrategyResult:
    """Findings produced by one strategy."""
    strategy: str
    findings: List[ValidationFinding] = field(default_factory=list)

    def warn(self, key: str, message: str):
        self.findings.append(ValidationFinding(key, message, Severity.WARNING, self.strategy))

    def error(self, key: str, message: str):
        self.findings.append(ValidationFinding(key, message, Severity.ERROR, self.strategy))


@dataclass
class ValidationResult:
    """Aggregated findings of a validation run."""
    findings: List[ValidationFinding] = field(default_factory=list)
    strategies_used: List[str] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationFinding]:
        return [f for f in self.findings if f.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[ValidationFinding]:
        return [f for f in self.findings if f.severity is Severity.WARNING]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, strategy_result: StrategyResult):
        self.findings.extend(strategy_result.findings)
        self.strategies_used.append(strategy_result.strategy)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'errors': [f.to_dict() for f in self.errors],
            'warnings': [f.to_dict() for f in self.warnings],
            'strategiesUsed': list(self.strategies_used),
        }


@dataclass(frozen=True)
class FrameworkContext:
    """
    Framework a set of environment variables is validated for.

    ``known_flags`` and ``community_reports`` override the registry tables
    for this framework when given.
    """
    framework: str
    version: Optional[str] = None
    known_flags: Optional[Mapping[str, Any]] = None
    community_reports: Optional[List[Mapping[str, Any]]] = None

    @classmethod
    def from_config(cls, framework_config: Any) -> 'FrameworkContext':
        """Build a context from a FrameworkContext, a mapping or an entry with ``framework``/``version``."""
        if isinstance(framework_config, cls):
            return framework_config
        if isinstance(framework_config, Mapping):
            return cls(
                framework=framework_config.get('framework'),
                version=framework_config.get('version'),
                known_flags=framework_config.get('known_flags', framework_config.get('knownFlags')),
                community_reports=framework_config.get('community_reports',
                                                       framework_config.get('communityReports')),
            )
        return cls(framework=framework_config.framework, version=framework_config.version)


class ValidationStrategy(ABC):
    """
    Abstract base class for environment variable validation strategies.

    Attributes
    ----------
    name : str
        Name reported in ``ValidationResult.strategies_used``
    option : str
        ValidationOptions attribute that switches the strategy on
    """

    name: str = ''
    option: str = ''

    def __init__(self):
        self.logger = get_mlcc_logger().bind(component=type(self).__name__)

    @abstractmethod
    def has_data(self, context: FrameworkContext) -> bool:
        """
        Whether the strategy has anything to check for the framework.

        Parameters
        ----------
        context : FrameworkContext
            Framework being validated

        Returns
        -------
        bool
            False when no table applies; the strategy is then skipped
        """
        pass

    @abstractmethod
    def validate(self, context: FrameworkContext, env_vars: Mapping[str, str]) -> StrategyResult:
        """
        Check every environment variable.

        Parameters
        ----------
        context : FrameworkContext
            Framework being validated
        env_vars : Mapping[str, str]
            Effective environment variable map

        Returns
        -------
        StrategyResult
            Warnings and errors, in env map order
        """
        pass
