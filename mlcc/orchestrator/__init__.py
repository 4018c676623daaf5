"""
Orchestration of a configuration run.
"""

from .events import EventSink, LoggerEventSink, RecordingEventSink, RecordedEvent
from .prompter import Prompter, NonInteractivePrompter, Question
from .manager import ConfigurationManager, RunOutcome, PHASES

__all__ = [
    'EventSink',
    'LoggerEventSink',
    'RecordingEventSink',
    'RecordedEvent',
    'Prompter',
    'NonInteractivePrompter',
    'Question',
    'ConfigurationManager',
    'RunOutcome',
    'PHASES'
]
