from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import pytest

from aoshell.core import Capabilities, Dispatcher, Evaluator, InputLoop, Session
from aoshell.services.protocols import LoadResult
from aoshell.services.wallet import Credential


@dataclass
class FakeRenderer:
    journal: list[str]
    inputs: list[str | BaseException] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)
    shown: list[tuple[str, str]] = field(default_factory=list)
    history: list[str] | None = None

    async def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        self.journal.append("read")
        if not self.inputs:
            raise EOFError
        line = self.inputs.pop(0)
        if isinstance(line, BaseException):
            raise line
        return line

    @contextmanager
    def progress(self, label: str = "") -> Iterator[None]:
        self.journal.append("progress.start")
        try:
            yield
        finally:
            self.journal.append("progress.stop")

    def bind_history(self, lines: list[str]) -> None:
        self.history = lines

    def _show(self, kind: str, text: str = "") -> None:
        self.shown.append((kind, text))
        self.journal.append(f"show.{kind}")

    def output(self, text: str) -> None:
        self._show("output", text)

    def error(self, text: str) -> None:
        self._show("error", text)

    def debug(self, message: str) -> None:
        self._show("debug", message)

    def live(self, message: str) -> None:
        self._show("live", message)

    def placeholder(self) -> None:
        self._show("placeholder")

    def repl_help(self) -> None:
        self._show("help")

    def editor_banner(self) -> None:
        self._show("banner")

    def exit_notice(self) -> None:
        self._show("exit")

    def splash(self) -> None:
        self._show("splash")

    def version(self, version: str, process_id: str | None = None) -> None:
        self._show("version", process_id or version)

    def texts(self, kind: str) -> list[str]:
        return [text for shown_kind, text in self.shown if shown_kind == kind]


@dataclass
class FakeMonitor:
    journal: list[str]
    starts: int = 0
    stops: int = 0

    def start(self) -> None:
        self.starts += 1
        self.journal.append("monitor.start")

    def stop(self) -> None:
        self.stops += 1
        self.journal.append("monitor.stop")


@dataclass
class FakeRemote:
    journal: list[str]
    replies: list[Mapping[str, Any] | Exception] = field(default_factory=list)
    calls: list[tuple[str, str, Credential]] = field(default_factory=list)

    async def evaluate(self, code: str, process_id: str, credential: Credential) -> Mapping[str, Any]:
        self.calls.append((code, process_id, credential))
        self.journal.append("evaluate")
        reply = self.replies.pop(0) if self.replies else {"output": "ok"}
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def submissions(self) -> list[str]:
        return [code for code, _pid, _cred in self.calls]


@dataclass
class FakeMonitorCommands:
    calls: list[tuple[str, Credential, str]] = field(default_factory=list)

    async def monitor(self, credential: Credential, process_id: str) -> str:
        self.calls.append(("monitor", credential, process_id))
        return "monitoring started"

    async def unmonitor(self, credential: Credential, process_id: str) -> str:
        self.calls.append(("unmonitor", credential, process_id))
        return "monitoring stopped"


@dataclass
class FakeLoader:
    results: dict[str, LoadResult] = field(default_factory=dict)
    lines: list[str] = field(default_factory=list)

    def expand(self, line: str) -> LoadResult:
        self.lines.append(line)
        return self.results.get(line, LoadResult.failed(f"unknown directive: {line}"))


@dataclass
class Harness:
    journal: list[str]
    session: Session
    renderer: FakeRenderer
    remote: FakeRemote
    monitor: FakeMonitor
    monitor_commands: FakeMonitorCommands
    file_loader: FakeLoader
    blueprint_loader: FakeLoader
    dispatcher: Dispatcher

    async def send(self, *lines: str) -> None:
        for line in lines:
            await self.dispatcher.dispatch(self.session, line)

    async def run(self, *lines: str | BaseException) -> None:
        self.renderer.inputs.extend(lines)
        await InputLoop(self.session, self.dispatcher, self.renderer).run()  # type: ignore[arg-type]


@pytest.fixture
def credential() -> Credential:
    return Credential(address="owner-address", key={"n": "AQAB"})


@pytest.fixture
def harness(credential: Credential) -> Harness:
    journal: list[str] = []
    renderer = FakeRenderer(journal)
    remote = FakeRemote(journal)
    monitor = FakeMonitor(journal)
    monitor_commands = FakeMonitorCommands()
    file_loader = FakeLoader()
    blueprint_loader = FakeLoader()
    evaluator = Evaluator(remote, renderer)  # type: ignore[arg-type]
    capabilities = Capabilities(
        evaluator=evaluator,
        monitor_commands=monitor_commands,
        file_loader=file_loader,
        blueprint_loader=blueprint_loader,
    )
    session = Session(process_id="pid-1", credential=credential, monitor=monitor)
    return Harness(
        journal=journal,
        session=session,
        renderer=renderer,
        remote=remote,
        monitor=monitor,
        monitor_commands=monitor_commands,
        file_loader=file_loader,
        blueprint_loader=blueprint_loader,
        dispatcher=Dispatcher(capabilities, renderer),  # type: ignore[arg-type]
    )
