"""
Base exception classes for the mlcc configuration engine.
"""


class MlccError(Exception):
    """Base exception for all mlcc errors."""
    pass


class ValidationError(MlccError):
    """Base exception for validation errors."""

    def __init__(self, field: str, value: str = None, message: str = None):
        self.field = field
        self.value = value
        error_msg = f"Validation error for field '{field}'"
        if value:
            error_msg += f" with value '{value}'"
        if message:
            error_msg += f": {message}"
        super().__init__(error_msg)


class ConfigurationError(MlccError):
    """Base exception for configuration errors."""

    def __init__(self, config_key: str = None, config_value: str = None, reason: str = None):
        self.config_key = config_key
        self.config_value = config_value
        self.reason = reason
        message = "Configuration error"
        if config_key:
            message += f" for '{config_key}'"
        if config_value:
            message += f" with value '{config_value}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class NotFoundError(MlccError):
    """Base exception for entity not found errors."""

    def __init__(self, entity_type: str, identifier: str = None, scope: str = None):
        self.entity_type = entity_type
        self.identifier = identifier
        self.scope = scope
        message = f"{entity_type} not found"
        if identifier:
            message += f" with identifier '{identifier}'"
        if scope:
            message += f" in {scope}"
        super().__init__(message)
