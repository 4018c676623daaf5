"""
Known-flags strategy.

Checks environment variables against the flags a framework is known to
accept: unknown and deprecated names are warnings, values of the wrong type
or outside the declared range are errors.
"""

from typing import Any, Mapping, Optional
import re

from mlcc.core.enums import FlagType
from .base import FrameworkContext, StrategyResult, ValidationStrategy

DEFAULT_BUCKET = 'default'
ALL_BUCKET = 'all'

_INTEGER = re.compile(r'^-?\d+$')
_FLOAT = re.compile(r'^-?\d+(\.\d+)?$')
_BOOLEANS = ('true', 'false', '0', '1', 'yes', 'no')


class KnownFlagsStrategy(ValidationStrategy):
    """
    Validates environment variables against the known-flags registry.

    Parameters
    ----------
    known_flags : Mapping, optional
        Registry table ``{framework: {bucket: {VAR: spec}}}`` where a bucket
        is an exact version, ``default`` or ``all``
    """

    name = 'known-flags-registry'
    option = 'use_known_flags'

    def __init__(self, known_flags: Optional[Mapping[str, Any]] = None):
        super().__init__()
        self.known_flags = known_flags or {}

    def flags_for(self, context: FrameworkContext) -> Mapping[str, Any]:
        """Flag table for the framework: exact version, then ``default``, then ``all``."""
        if context.known_flags is not None:
            return context.known_flags

        buckets = self.known_flags.get(context.framework) or {}
        for bucket in (context.version, DEFAULT_BUCKET, ALL_BUCKET):
            if bucket is not None and buckets.get(str(bucket)):
                return buckets[str(bucket)]
        return {}

    def has_data(self, context: FrameworkContext) -> bool:
        return bool(self.flags_for(context))

    def validate(self, context: FrameworkContext, env_vars: Mapping[str, str]) -> StrategyResult:
        result = StrategyResult(self.name)
        flags = self.flags_for(context)
        if not flags:
            return result

        for key, value in env_vars.items():
            spec = flags.get(key)
            if spec is None:
                result.warn(key, f"Unknown environment variable '{key}' for {context.framework} {context.version}")
                continue

            if spec.get('deprecated'):
                message = f"Environment variable '{key}' is deprecated."
                if spec.get('deprecationMessage'):
                    message += f" {spec['deprecationMessage']}"
                result.warn(key, message)
                if spec.get('replacement'):
                    result.warn(key, f"Consider using '{spec['replacement']}' instead of '{key}'")

            self._check_value(result, key, value, spec)

        self.logger.debug("Known flags checked", framework=context.framework,
                          version=context.version, findings=len(result.findings))
        return result

    def _check_value(self, result: StrategyResult, key: str, value: Any, spec: Mapping[str, Any]):
        flag_type = spec.get('type', FlagType.STRING.value)
        raw = str(value)

        if flag_type == FlagType.INTEGER.value:
            if not _INTEGER.match(raw):
                result.error(key, f"Environment variable '{key}' must be an integer, got '{raw}'")
                return
            self._check_range(result, key, raw, int(raw), spec)
        elif flag_type == FlagType.FLOAT.value:
            if not _FLOAT.match(raw):
                result.error(key, f"Environment variable '{key}' must be a float, got '{raw}'")
                return
            self._check_range(result, key, raw, float(raw), spec)
        elif flag_type == FlagType.BOOLEAN.value:
            if raw.lower() not in _BOOLEANS:
                result.error(key, f"Environment variable '{key}' must be a boolean (true/false, 0/1, yes/no), got '{raw}'")

    @staticmethod
    def _check_range(result: StrategyResult, key: str, raw: str, number: float, spec: Mapping[str, Any]):
        # Bounds are inclusive
        if spec.get('min') is not None and number < spec['min']:
            result.error(key, f"Environment variable '{key}' must be >= {spec['min']}, got {raw}")
        if spec.get('max') is not None and number > spec['max']:
            result.error(key, f"Environment variable '{key}' must be <= {spec['max']}, got {raw}")
