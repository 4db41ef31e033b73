"""Contracts for the capabilities the REPL consumes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from aoshell.services.wallet import Credential


@dataclass(frozen=True)
class LoadResult:
    """Outcome of expanding one load directive."""

    code: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def loaded(cls, code: str) -> LoadResult:
        return cls(code=code)

    @classmethod
    def failed(cls, message: str) -> LoadResult:
        return cls(error=message)


@dataclass(frozen=True)
class StatusBatch:
    """New status messages plus the cursor to resume from."""

    messages: list[str] = field(default_factory=list)
    cursor: str | None = None


class CredentialProvider(Protocol):
    def acquire(self) -> Credential: ...


class ProcessRegistry(Protocol):
    async def register(self, credential: Credential, name: str) -> str: ...


class RemoteEvaluator(Protocol):
    async def evaluate(self, code: str, process_id: str, credential: Credential) -> Mapping[str, Any]: ...


class MonitorCommands(Protocol):
    async def monitor(self, credential: Credential, process_id: str) -> str: ...

    async def unmonitor(self, credential: Credential, process_id: str) -> str: ...


class StatusSource(Protocol):
    async def read_status(self, process_id: str, cursor: str | None) -> StatusBatch: ...


class Loader(Protocol):
    def expand(self, line: str) -> LoadResult: ...


class MonitorHandle(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...
