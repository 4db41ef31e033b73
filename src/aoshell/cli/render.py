"""CLI renderer for aoshell."""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import AbstractContextManager

from prompt_toolkit import PromptSession
from prompt_toolkit.history import History
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console
from rich.markup import escape

EMPTY_PLACEHOLDER = "undefined"
EDITOR_BANNER = "<editor mode> use '.done' to submit or '.cancel' to cancel"
EXIT_NOTICE = "Exiting..."
SIGNING_LABEL = "[Signing message and sequencing...]"
CONNECTING_LABEL = "[Connecting to Process...]"

REPL_HELP = """\
[bold]Commands[/bold]
  [cyan].load <file>[/cyan]             Evaluate the contents of a local file
  [cyan].load-blueprint <name>[/cyan]   Evaluate a bundled blueprint
  [cyan].editor[/cyan]                  Enter multi-line editor mode
  [cyan].done[/cyan]                    Submit the editor buffer
  [cyan].cancel[/cyan]                  Discard the editor buffer
  [cyan].monitor[/cyan]                 Ask the network to tick this process on a schedule
  [cyan].unmonitor[/cyan]               Stop scheduled ticks
  [cyan].help[/cyan]                    Show this help
  [cyan].exit[/cyan]                    Quit the console
Anything else is sent to the process as code."""

SPLASH = "[bold green]aos[/bold green] - an interactive console for remote processes"


class SessionHistory(History):
    """Expose an append-only list of lines to prompt_toolkit recall."""

    def __init__(self, lines: list[str]) -> None:
        super().__init__()
        self._lines = lines

    def load_history_strings(self) -> Iterable[str]:
        return list(reversed(self._lines))

    def store_string(self, string: str) -> None:
        # The input loop owns appending.
        return None


class Renderer:
    """CLI renderer using Rich for terminal output."""

    def __init__(self, console: Console | None = None) -> None:
        self.console: Console = console or Console()
        self._history: History | None = None
        self._prompt_session: PromptSession[str] | None = None

    def bind_history(self, lines: list[str]) -> None:
        self._history = SessionHistory(lines)
        self._prompt_session = None

    async def read_line(self, prompt: str) -> str:
        """Prompt user for one line."""
        if self._prompt_session is None:
            self._prompt_session = PromptSession(history=self._history)
        with patch_stdout(raw=True):
            return await self._prompt_session.prompt_async(prompt)

    def progress(self, label: str = SIGNING_LABEL) -> AbstractContextManager[object]:
        """Spinner shown for the duration of one remote call."""
        return self.console.status(f"[grey50]{escape(label)}[/grey50]", spinner="dots")

    def output(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False)

    def error(self, text: str) -> None:
        self.console.print(f"[red]{escape(text)}[/red]", highlight=False)

    def debug(self, message: str) -> None:
        self.console.print(f"[dim]{escape(message)}[/dim]")

    def live(self, message: str) -> None:
        self.console.print(f"[cyan]{escape(message)}[/cyan]", highlight=False)

    def placeholder(self) -> None:
        self.console.print(f"[dim]{EMPTY_PLACEHOLDER}[/dim]")

    def repl_help(self) -> None:
        self.console.print(REPL_HELP)

    def editor_banner(self) -> None:
        self.console.print(EDITOR_BANNER, markup=False)

    def exit_notice(self) -> None:
        self.console.print(EXIT_NOTICE)

    def splash(self) -> None:
        self.console.print(SPLASH)

    def version(self, version: str, process_id: str | None = None) -> None:
        self.console.print(f"[dim]aos client version:[/dim] {version}")
        if process_id:
            self.console.print(f"[dim]Your AOS process:[/dim] [green]{process_id}[/green]")


def create_cli_renderer() -> Renderer:
    """Create and return a Renderer instance."""
    return Renderer()
