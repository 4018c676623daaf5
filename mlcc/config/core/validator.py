"""
Configuration validation framework.

Provides a small JSON-schema style validator used to check registry data and
configuration files before they are turned into typed objects.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional, Callable
import re

from mlcc.logger import get_mlcc_logger


class SchemaIssue:
    """A single structural problem found in a document."""

    def __init__(self, message: str, path: Optional[str] = None, value: Any = None):
        self.message = message
        self.path = path
        self.value = value

    def __str__(self):
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message

    def __repr__(self):
        return f"SchemaIssue({str(self)!r})"


class SchemaResult:
    """Result of validating a document."""

    def __init__(self, is_valid: bool = True, issues: Optional[List[SchemaIssue]] = None):
        self.is_valid = is_valid
        self.issues = issues or []

    def add_issue(self, issue: SchemaIssue):
        """Add a validation issue."""
        self.issues.append(issue)
        self.is_valid = False

    def merge(self, other: 'SchemaResult'):
        for issue in other.issues:
            self.add_issue(issue)

    @property
    def messages(self) -> List[str]:
        return [str(issue) for issue in self.issues]

    def __bool__(self):
        return self.is_valid


class ConfigValidator(ABC):
    """Abstract base class for configuration validators."""

    def __init__(self, domain: str):
        self.domain = domain
        self.logger = get_mlcc_logger().bind(component=f"ConfigValidator_{domain}")

    @abstractmethod
    def validate(self, config: Dict[str, Any]) -> SchemaResult:
        """Validate configuration data."""
        pass


_TYPE_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "object": lambda v: isinstance(v, dict),
    "array": lambda v: isinstance(v, (list, tuple)),
    "string": lambda v: isinstance(v, str),
    "boolean": lambda v: isinstance(v, bool),
    "integer": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "null": lambda v: v is None,
}


class SchemaValidator(ConfigValidator):
    """
    Schema-based validator.

    Supports the subset of JSON schema keywords the registry schemas use:
    ``type`` (single or list), ``enum``, ``pattern``, ``minLength``,
    ``minimum``, ``maximum``, ``minItems``, ``items``, ``properties``,
    ``required``, ``additionalProperties`` (bool or schema) and
    ``propertyNames``.
    """

    def __init__(self, domain: str, schema: Dict[str, Any]):
        super().__init__(domain)
        self.schema = schema

    def validate(self, config: Any) -> SchemaResult:
        """Validate a document against the schema, collecting every issue."""
        result = SchemaResult()
        self._validate_node(config, self.schema, result, path="")
        if not result.is_valid:
            self.logger.debug("Schema validation failed", issues=len(result.issues))
        return result

    def _validate_node(self, value: Any, schema: Dict[str, Any], result: SchemaResult, path: str):
        expected = schema.get("type")
        if expected is not None:
            types = expected if isinstance(expected, list) else [expected]
            if not any(_TYPE_CHECKS[t](value) for t in types):
                result.add_issue(SchemaIssue(
                    f"must be of type {' or '.join(types)}, got {type(value).__name__}",
                    path=path or "<root>", value=value
                ))
                return

        if value is None:
            return

        if "enum" in schema and value not in schema["enum"]:
            result.add_issue(SchemaIssue(
                f"must be one of {schema['enum']}, got {value!r}", path=path, value=value
            ))

        if isinstance(value, str):
            if "minLength" in schema and len(value) < schema["minLength"]:
                result.add_issue(SchemaIssue(
                    f"must be at least {schema['minLength']} characters", path=path, value=value
                ))
            if "pattern" in schema and not re.search(schema["pattern"], value):
                result.add_issue(SchemaIssue(
                    f"'{value}' does not match pattern {schema['pattern']}", path=path, value=value
                ))

        if _TYPE_CHECKS["number"](value):
            if "minimum" in schema and value < schema["minimum"]:
                result.add_issue(SchemaIssue(f"must be >= {schema['minimum']}", path=path, value=value))
            if "maximum" in schema and value > schema["maximum"]:
                result.add_issue(SchemaIssue(f"must be <= {schema['maximum']}", path=path, value=value))

        if isinstance(value, (list, tuple)):
            if "minItems" in schema and len(value) < schema["minItems"]:
                result.add_issue(SchemaIssue(
                    f"must contain at least {schema['minItems']} item(s)", path=path, value=value
                ))
            if "items" in schema:
                for index, item in enumerate(value):
                    self._validate_node(item, schema["items"], result, f"{path}[{index}]")

        if isinstance(value, dict):
            self._validate_object(value, schema, result, path)

    def _validate_object(self, value: Dict[str, Any], schema: Dict[str, Any], result: SchemaResult, path: str):
        for key in schema.get("required", []):
            if key not in value:
                result.add_issue(SchemaIssue(f"missing required field '{key}'", path=path or "<root>"))

        properties = schema.get("properties", {})
        extra = schema.get("additionalProperties", True)
        names = schema.get("propertyNames")

        for key, item in value.items():
            full_path = f"{path}.{key}" if path else str(key)
            if names and "pattern" in names and not re.search(names["pattern"], str(key)):
                result.add_issue(SchemaIssue(
                    f"key '{key}' does not match pattern {names['pattern']}", path=path or "<root>", value=key
                ))
            if key in properties:
                self._validate_node(item, properties[key], result, full_path)
            elif extra is False:
                result.add_issue(SchemaIssue(f"unexpected field '{key}'", path=path or "<root>"))
            elif isinstance(extra, dict):
                self._validate_node(item, extra, result, full_path)


class BusinessValidator(ConfigValidator):
    """Validator that runs a list of rule callables over a document."""

    def __init__(self, domain: str, validation_rules: List[Callable[[Dict[str, Any]], Any]]):
        super().__init__(domain)
        self.validation_rules = validation_rules

    def validate(self, config: Dict[str, Any]) -> SchemaResult:
        """
        Validate configuration using business rules.

        A rule returns a SchemaResult, a list of messages, or False on failure.
        """
        result = SchemaResult()

        for rule in self.validation_rules:
            rule_result = rule(config)
            if isinstance(rule_result, SchemaResult):
                result.merge(rule_result)
            elif isinstance(rule_result, list):
                for message in rule_result:
                    result.add_issue(SchemaIssue(message))
            elif rule_result is False:
                result.add_issue(SchemaIssue(f"Business rule {rule.__name__} failed"))

        return result
