import logging
import re
from typing import Any

import structlog
from structlog.types import EventDict, Processor

LOGGER_NAME = "mlcc"


def drop_color_message_key(_, __, event_dict: EventDict) -> EventDict:
    """
    Some third-party handlers log the message a second time in `color_message`.
    Drop the key so it does not show up twice in rendered output.
    """
    event_dict.pop("color_message", None)
    return event_dict


def _already_configured(root_logger: logging.Logger) -> bool:
    for handler in root_logger.handlers:
        if (isinstance(handler, logging.StreamHandler) and
                isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)):
            return True
    return False


def setup_logging(json_logs: bool = False, log_level: str = "INFO", force: bool = False):
    """Configure structlog on top of the stdlib root logger for the mlcc package"""

    root_logger = logging.getLogger()
    if _already_configured(root_logger) and not force:
        # Only adjust the level; the host application owns the handlers
        root_logger.setLevel(log_level.upper())
        return

    timestamper = structlog.processors.TimeStamper(fmt="iso")

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.stdlib.ExtraAdder(),
        drop_color_message_key,
        timestamper,
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        # Console output pretty-prints tracebacks itself
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    log_renderer: Processor
    if json_logs:
        log_renderer = structlog.processors.JSONRenderer()
    else:
        log_renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        # Runs only on records that do not originate within structlog
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            log_renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())


def get_mlcc_logger(name: str = LOGGER_NAME) -> structlog.stdlib.BoundLogger:
    """
    Return the structlog logger used by mlcc components.

    Components bind their own name once, e.g.
    ``get_mlcc_logger().bind(component="RegistryLoader")``.
    """
    return structlog.stdlib.get_logger(name)


class MlccStructLogger:
    """
    Structured logger for the mlcc package.
    Uses context variables to bind data that will be automatically included in all log messages.
    """

    def __init__(self, log_name: str = LOGGER_NAME):
        self.logger = get_mlcc_logger(log_name)

    @staticmethod
    def _to_snake_case(name):
        """Convert CamelCase to snake_case"""
        return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()

    def bind(self, *args, **new_values: Any):
        """
        Bind values to the logger context for the rest of the run.

        Args:
            *args: Objects exposing a 'key' attribute (registry entries); bound under
                their snake_cased class name
            **new_values: Key-value pairs to bind to the context
        """
        for arg in args:
            if hasattr(arg, 'key'):
                key = self._to_snake_case(type(arg).__name__)
                structlog.contextvars.bind_contextvars(**{key: arg.key})
            else:
                self.logger.error(
                    "Unsupported argument when binding log context",
                    argument_type=type(arg).__name__,
                )

        structlog.contextvars.bind_contextvars(**new_values)

    @staticmethod
    def unbind(*keys: str):
        """Unbind keys from the logger context"""
        structlog.contextvars.unbind_contextvars(*keys)

    def debug(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.debug(event, *args, **kw)

    def info(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.info(event, *args, **kw)

    def warning(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.warning(event, *args, **kw)

    warn = warning

    def error(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.error(event, *args, **kw)

    def exception(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.exception(event, *args, **kw)


def init_logger(settings):
    """
    Initialize structured logging from engine settings.

    Args:
        settings: EngineSettings (or any object with log_level and json_logs)

    Returns:
        MlccStructLogger: Configured structured logger instance
    """
    setup_logging(json_logs=settings.json_logs, log_level=settings.log_level)
    return MlccStructLogger(LOGGER_NAME)
