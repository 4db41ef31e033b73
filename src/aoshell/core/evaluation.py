"""Remote evaluation of one submission."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger

from aoshell.cli.render import SIGNING_LABEL, Renderer
from aoshell.errors import EvaluationError
from aoshell.services.protocols import MonitorHandle, RemoteEvaluator
from aoshell.services.wallet import Credential


@dataclass(frozen=True)
class EvaluationResult:
    """Displayable outcome of one evaluation."""

    output: str | None = None
    error: str | None = None
    prompt: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> EvaluationResult:
        return cls(
            output=_text(payload.get("output")),
            error=_text(payload.get("error")),
            prompt=_text(payload.get("prompt")),
        )

    @classmethod
    def failed(cls, message: str) -> EvaluationResult:
        return cls(output=message)


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


class Evaluator:
    """Send submissions to the remote process and normalize the outcome.

    Failures of the remote call never escape `evaluate`; they come back as a
    result whose output is the failure message. The monitor handle passed in
    is stopped once before the call and started once after it.
    """

    def __init__(self, remote: RemoteEvaluator, renderer: Renderer, *, verbose: bool = False) -> None:
        self._remote = remote
        self._renderer = renderer
        self._verbose = verbose

    async def evaluate(
        self,
        code: str,
        process_id: str,
        credential: Credential,
        *,
        monitor: MonitorHandle | None = None,
        label: str = SIGNING_LABEL,
    ) -> EvaluationResult:
        if monitor is not None:
            monitor.stop()
        try:
            with self._renderer.progress(label):
                result = await self._call(code, process_id, credential)
        finally:
            if monitor is not None:
                monitor.start()
        return result

    async def _call(self, code: str, process_id: str, credential: Credential) -> EvaluationResult:
        try:
            payload = await self._remote.evaluate(code, process_id, credential)
            if not isinstance(payload, Mapping):
                raise EvaluationError(f"evaluation returned {type(payload).__name__}, expected an object")
            if self._verbose:
                self._renderer.debug(f"process: {process_id}")
                self._renderer.debug(f"result: {dict(payload)!r}")
            return EvaluationResult.from_payload(payload)
        except EvaluationError as exc:
            logger.info("repl.evaluate.failed process={} error={}", process_id, exc)
            return EvaluationResult.failed(str(exc))
        except Exception as exc:
            logger.exception("repl.evaluate.error process={}", process_id)
            return EvaluationResult.failed(str(exc) or type(exc).__name__)

    def show(self, result: EvaluationResult) -> None:
        if result.is_error:
            self._renderer.error(result.error or "")
        elif result.output is None:
            self._renderer.placeholder()
        else:
            self._renderer.output(result.output)
