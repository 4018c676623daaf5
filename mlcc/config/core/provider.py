"""
Configuration provider base classes and implementations.

Providers supply raw parameter values from one kind of source (a config file,
the process environment, in-memory CLI options). The explicit configuration
of a run is collected from them in precedence order.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, TypeVar, Generic, Mapping
from pathlib import Path
import json
import os
import threading

import yaml

from mlcc.core.exceptions import ConfigurationError
from mlcc.logger import get_mlcc_logger

T = TypeVar('T')


class ConfigProvider(ABC, Generic[T]):
    """
    Abstract base class for configuration providers.

    ``source`` names the kind of source ("config_file", "env" or "cli") and is
    checked against the parameter matrix when values are collected.
    """

    source: str = ""

    def __init__(self, domain: str):
        self.domain = domain
        self.logger = get_mlcc_logger().bind(component=f"ConfigProvider_{domain}")
        self._lock = threading.RLock()

    @abstractmethod
    def get_config(self) -> T:
        """Get current configuration."""
        pass

    @abstractmethod
    def update_config(self, updates: Dict[str, Any]) -> bool:
        """Update configuration with new values."""
        pass

    def validate_config(self, config: Dict[str, Any]) -> bool:
        """Basic validation - can be overridden by subclasses."""
        return isinstance(config, dict)

    @abstractmethod
    def reset_to_defaults(self) -> bool:
        """Reset configuration to defaults."""
        pass


class FileConfigProvider(ConfigProvider[Dict[str, Any]]):
    """
    File-based provider reading a YAML or JSON document.

    A missing file yields an empty configuration. A file that exists but
    cannot be parsed raises ConfigurationError.
    """

    source = "config_file"

    def __init__(self, path: str, domain: str = "config_file"):
        super().__init__(domain)
        self.config_file = Path(path)
        self._config_cache: Optional[Dict[str, Any]] = None
        self._last_modified: Optional[float] = None

    @property
    def is_json(self) -> bool:
        return self.config_file.suffix.lower() == ".json"

    def get_config(self) -> Dict[str, Any]:
        """Get current configuration from file."""
        with self._lock:
            self._refresh_cache()
            return self._config_cache.copy() if self._config_cache else {}

    def update_config(self, updates: Dict[str, Any]) -> bool:
        """Update configuration and save to file."""
        with self._lock:
            current_config = self.get_config()
            current_config.update(updates)

            if not self.validate_config(current_config):
                return False

            self._save_config(current_config)
            self._config_cache = current_config
            self._last_modified = self.config_file.stat().st_mtime
            return True

    def reset_to_defaults(self) -> bool:
        """Reset to defaults by removing the config file."""
        with self._lock:
            if self.config_file.exists():
                self.config_file.unlink()
            self._config_cache = None
            self._last_modified = None
        return True

    def _refresh_cache(self):
        """Refresh configuration cache if file has changed."""
        if not self.config_file.exists():
            self._config_cache = None
            self._last_modified = None
            return

        current_mtime = self.config_file.stat().st_mtime
        if self._last_modified is not None and current_mtime <= self._last_modified:
            return

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f) if self.is_json else yaml.safe_load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigurationError(str(self.config_file), reason=f"unreadable config file: {e}") from e

        data = data or {}
        if not self.validate_config(data):
            raise ConfigurationError(str(self.config_file), reason="config file must contain a mapping")

        self._config_cache = data
        self._last_modified = current_mtime
        self.logger.debug("Config file loaded", path=str(self.config_file), keys=len(data))

    def _save_config(self, config: Dict[str, Any]):
        """Save configuration to file."""
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, 'w', encoding='utf-8') as f:
            if self.is_json:
                json.dump(config, f, indent=2)
            else:
                yaml.dump(config, f, default_flow_style=False, indent=2)


class RuntimeConfigProvider(ConfigProvider[Dict[str, Any]]):
    """
    Runtime configuration provider that keeps config in memory.

    Used for values already parsed by the caller, typically CLI options.
    """

    def __init__(self, domain: str = "cli", initial_config: Optional[Dict[str, Any]] = None,
                 source: str = "cli"):
        super().__init__(domain)
        self.source = source
        self._config = dict(initial_config or {})

    def get_config(self) -> Dict[str, Any]:
        """Get current configuration from memory."""
        with self._lock:
            return self._config.copy()

    def update_config(self, updates: Dict[str, Any]) -> bool:
        """Update configuration in memory."""
        with self._lock:
            new_config = self._config.copy()
            new_config.update(updates)

            if self.validate_config(new_config):
                self._config = new_config
                return True
            return False

    def reset_to_defaults(self) -> bool:
        """Reset to empty configuration."""
        with self._lock:
            self._config = {}
            return True


class EnvironmentConfigProvider(ConfigProvider[Dict[str, Any]]):
    """
    Reads parameters from environment variables.

    ``variables`` maps parameter names to environment variable names; by
    default it is built from the parameter matrix.
    """

    source = "env"

    def __init__(self, variables: Mapping[str, str], environ: Optional[Mapping[str, str]] = None,
                 domain: str = "env"):
        super().__init__(domain)
        self.variables = dict(variables)
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    def get_config(self) -> Dict[str, Any]:
        with self._lock:
            return {
                name: self.environ[var]
                for name, var in self.variables.items()
                if var in self.environ
            }

    def update_config(self, updates: Dict[str, Any]) -> bool:
        # The process environment is not written back
        return False

    def reset_to_defaults(self) -> bool:
        return False
