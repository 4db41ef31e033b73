"""Meta-command classification as an ordered transition table."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from aoshell.core.session import Mode
from aoshell.services.loaders import BLUEPRINT_DIRECTIVE, FILE_DIRECTIVE

HELP = ".help"
MONITOR = ".monitor"
UNMONITOR = ".unmonitor"
EDITOR = ".editor"
DONE = ".done"
CANCEL = ".cancel"
EXIT = ".exit"


class Action(Enum):
    HELP = "help"
    MONITOR = "monitor"
    UNMONITOR = "unmonitor"
    LOAD_BLUEPRINT = "load_blueprint"
    LOAD_FILE = "load_file"
    ENTER_EDITOR = "enter_editor"
    SUBMIT_BUFFER = "submit_buffer"
    CANCEL_EDITOR = "cancel_editor"
    BUFFER_LINE = "buffer_line"
    EXIT = "exit"
    EVALUATE = "evaluate"


@dataclass(frozen=True)
class Rule:
    action: Action
    matches: Callable[[Mode, str], bool]


def _normal_exact(text: str) -> Callable[[Mode, str], bool]:
    return lambda mode, line: mode is Mode.NORMAL and line == text


def _editor_exact(text: str) -> Callable[[Mode, str], bool]:
    return lambda mode, line: mode is Mode.EDITOR and line == text


def _any_exact(text: str) -> Callable[[Mode, str], bool]:
    return lambda _mode, line: line == text


# First match wins. An expanded blueprint is still checked against `.load`;
# an expanded file resumes at `.editor`.
RULES: tuple[Rule, ...] = (
    Rule(Action.HELP, _normal_exact(HELP)),
    Rule(Action.MONITOR, _normal_exact(MONITOR)),
    Rule(Action.UNMONITOR, _normal_exact(UNMONITOR)),
    Rule(Action.LOAD_BLUEPRINT, lambda _mode, line: line.startswith(BLUEPRINT_DIRECTIVE)),
    Rule(Action.LOAD_FILE, lambda _mode, line: line.startswith(FILE_DIRECTIVE)),
    Rule(Action.ENTER_EDITOR, _any_exact(EDITOR)),
    Rule(Action.SUBMIT_BUFFER, _editor_exact(DONE)),
    Rule(Action.CANCEL_EDITOR, _editor_exact(CANCEL)),
    Rule(Action.BUFFER_LINE, lambda mode, _line: mode is Mode.EDITOR),
    Rule(Action.EXIT, _any_exact(EXIT)),
    Rule(Action.EVALUATE, lambda _mode, _line: True),
)


def _index_of(action: Action) -> int:
    return next(index for index, rule in enumerate(RULES) if rule.action is action)


RESUME_AFTER_BLUEPRINT = _index_of(Action.LOAD_FILE)
RESUME_AFTER_FILE = _index_of(Action.ENTER_EDITOR)


def classify(mode: Mode, line: str, *, start: int = 0) -> Action:
    """Return the action of the first rule at or after `start` matching the line."""
    for rule in RULES[start:]:
        if rule.matches(mode, line):
            return rule.action
    return Action.EVALUATE
