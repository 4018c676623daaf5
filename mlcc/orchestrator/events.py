"""
User-facing event sinks.

The orchestrator reports progress and findings through an EventSink rather
than printing; the console front end supplies its own implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List

from mlcc.logger import get_mlcc_logger


class EventSink(ABC):
    """Receives informational, warning and error messages from a run."""

    @abstractmethod
    def info(self, message: str, **details: Any):
        pass

    @abstractmethod
    def warn(self, message: str, **details: Any):
        pass

    @abstractmethod
    def error(self, message: str, **details: Any):
        pass


class LoggerEventSink(EventSink):
    """Forwards events to the structured logger."""

    def __init__(self, component: str = "ConfigurationRun"):
        self.logger = get_mlcc_logger().bind(component=component)

    def info(self, message: str, **details: Any):
        self.logger.info(message, **details)

    def warn(self, message: str, **details: Any):
        self.logger.warning(message, **details)

    def error(self, message: str, **details: Any):
        self.logger.error(message, **details)


@dataclass
class RecordedEvent:
    level: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class RecordingEventSink(EventSink):
    """Keeps events in memory, e.g. for a summary screen."""

    def __init__(self):
        self.events: List[RecordedEvent] = []

    def info(self, message: str, **details: Any):
        self.events.append(RecordedEvent('info', message, details))

    def warn(self, message: str, **details: Any):
        self.events.append(RecordedEvent('warning', message, details))

    def error(self, message: str, **details: Any):
        self.events.append(RecordedEvent('error', message, details))

    def messages(self, level: str = None) -> List[str]:
        return [e.message for e in self.events if level is None or e.level == level]
