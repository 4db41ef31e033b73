"""REPL orchestration: session state, transition table, evaluation, and the input loop."""

from .commands import Action, classify
from .dispatcher import Capabilities, Dispatcher
from .evaluation import EvaluationResult, Evaluator
from .loop import InputLoop
from .session import Mode, Session

__all__ = [
    "Action",
    "Capabilities",
    "Dispatcher",
    "EvaluationResult",
    "Evaluator",
    "InputLoop",
    "Mode",
    "Session",
    "classify",
]
