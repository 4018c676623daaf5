"""
Prompting interface.

The interactive widget is supplied by the front end; the orchestrator only
hands it the questions of one phase at a time and asks for confirmation of
blocking findings.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from mlcc.core.enums import Phase


@dataclass(frozen=True)
class Question:
    """A single prompt: the parameter it answers, its text and its default."""
    name: str
    message: str
    default: Any = None
    choices: Optional[Sequence[str]] = None


class Prompter(ABC):
    """Collects answers from the user."""

    @abstractmethod
    def ask(self, phase: Phase, questions: List[Question], context: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Ask the questions of one phase.

        Parameters
        ----------
        phase : Phase
            Phase being prompted
        questions : List[Question]
            Only parameters that still need a value
        context : Mapping[str, Any]
            Values resolved in earlier phases

        Returns
        -------
        Dict[str, Any]
            Answers keyed by parameter name; unanswered questions may be
            omitted or None
        """
        pass

    @abstractmethod
    def confirm(self, message: str, default: bool = False) -> bool:
        """Ask whether to continue past a blocking finding."""
        pass


class NonInteractivePrompter(Prompter):
    """
    Prompter for unattended runs.

    Every question is answered with its default. Blocking findings are
    declined unless ``assume_yes`` is set.
    """

    def __init__(self, assume_yes: bool = False, answers: Optional[Mapping[str, Any]] = None):
        self.assume_yes = assume_yes
        self.answers = dict(answers or {})

    def ask(self, phase: Phase, questions: List[Question], context: Mapping[str, Any]) -> Dict[str, Any]:
        return {q.name: self.answers.get(q.name, q.default) for q in questions}

    def confirm(self, message: str, default: bool = False) -> bool:
        return self.assume_yes
