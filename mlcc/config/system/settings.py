"""
Engine settings.

Process-level options for a configuration run, read from ``MLCC_*``
environment variables.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
import os

from mlcc.core.exceptions import ConfigurationError


_TRUE = ('true', '1', 'yes', 'on')
_FALSE = ('false', '0', 'no', 'off')


def _parse_bool(key: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(key, raw, "expected a boolean")


@dataclass(frozen=True)
class ValidationOptions:
    """Switches for the environment-variable validation engine."""
    enabled: bool = True
    use_known_flags: bool = True
    use_community_reports: bool = True

    def is_enabled(self, option: str) -> bool:
        return self.enabled and bool(getattr(self, option, False))


@dataclass
class EngineSettings:
    """
    Settings for a configuration run.

    Environment variables:
        MLCC_REGISTRY_DIR        directory holding registry YAML files
        MLCC_VALIDATE_ENV_VARS   turn env-var validation on or off
        MLCC_KNOWN_FLAGS         enable the known-flags strategy
        MLCC_COMMUNITY_REPORTS   enable the community-reports strategy
        MLCC_OFFLINE             skip model metadata lookups
        MLCC_METADATA_TIMEOUT    metadata request timeout, seconds
        MLCC_LOG_LEVEL           log level name
        MLCC_JSON_LOGS           render logs as JSON
    """

    registry_dir: Optional[str] = None
    validate_env_vars: bool = True
    use_known_flags: bool = True
    use_community_reports: bool = True
    offline: bool = False
    metadata_timeout: float = 5.0
    log_level: str = "INFO"
    json_logs: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    _ENV_KEYS = {
        'registry_dir': 'MLCC_REGISTRY_DIR',
        'validate_env_vars': 'MLCC_VALIDATE_ENV_VARS',
        'use_known_flags': 'MLCC_KNOWN_FLAGS',
        'use_community_reports': 'MLCC_COMMUNITY_REPORTS',
        'offline': 'MLCC_OFFLINE',
        'metadata_timeout': 'MLCC_METADATA_TIMEOUT',
        'log_level': 'MLCC_LOG_LEVEL',
        'json_logs': 'MLCC_JSON_LOGS',
    }

    def validation_options(self) -> ValidationOptions:
        return ValidationOptions(
            enabled=self.validate_env_vars,
            use_known_flags=self.use_known_flags,
            use_community_reports=self.use_community_reports,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return {
            'registry_dir': self.registry_dir,
            'validate_env_vars': self.validate_env_vars,
            'use_known_flags': self.use_known_flags,
            'use_community_reports': self.use_community_reports,
            'offline': self.offline,
            'metadata_timeout': self.metadata_timeout,
            'log_level': self.log_level,
            'json_logs': self.json_logs,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EngineSettings':
        """Create settings from dictionary; unknown keys are kept in ``extra``."""
        settings = cls()
        known = settings.to_dict().keys()
        for key, value in data.items():
            if key in known:
                setattr(settings, key, value)
            else:
                settings.extra[key] = value
        return settings

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'EngineSettings':
        """Create settings from MLCC_* environment variables."""
        environ = os.environ if environ is None else environ
        settings = cls()

        for attr, key in cls._ENV_KEYS.items():
            if key not in environ:
                continue
            raw = environ[key]
            current = getattr(settings, attr)
            if isinstance(current, bool):
                value = _parse_bool(key, raw)
            elif attr == 'metadata_timeout':
                try:
                    value = float(raw)
                except ValueError:
                    raise ConfigurationError(key, raw, "expected a number of seconds") from None
                if value <= 0:
                    raise ConfigurationError(key, raw, "timeout must be positive")
            elif attr == 'log_level':
                value = raw.upper()
            else:
                value = raw
            setattr(settings, attr, value)

        return settings
