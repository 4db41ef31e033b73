"""REPL session state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from aoshell.services.protocols import MonitorHandle
from aoshell.services.wallet import Credential

DEFAULT_PROMPT = "aos> "


class Mode(Enum):
    NORMAL = "normal"
    EDITOR = "editor"
    TERMINATED = "terminated"


@dataclass
class Session:
    """Mutable state threaded through the input loop and dispatcher."""

    process_id: str
    credential: Credential
    prompt: str = DEFAULT_PROMPT
    mode: Mode = Mode.NORMAL
    editor_buffer: str = ""
    history: list[str] = field(default_factory=list)
    monitor: MonitorHandle | None = None

    @property
    def terminated(self) -> bool:
        return self.mode is Mode.TERMINATED

    @property
    def current_prompt(self) -> str:
        return "" if self.mode is Mode.EDITOR else self.prompt

    def enter_editor(self) -> None:
        self.mode = Mode.EDITOR

    def append_to_buffer(self, line: str) -> None:
        self.editor_buffer += line + "\n"

    def take_buffer(self) -> str:
        """Leave editor mode and hand back the buffered submission."""
        submission = self.editor_buffer
        self.editor_buffer = ""
        self.mode = Mode.NORMAL
        return submission

    def cancel_editor(self) -> None:
        self.editor_buffer = ""
        self.mode = Mode.NORMAL

    def terminate(self) -> None:
        self.editor_buffer = ""
        self.mode = Mode.TERMINATED

    def update_prompt(self, prompt: str | None) -> None:
        if prompt:
            self.prompt = prompt
