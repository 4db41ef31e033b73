"""HTTP client for the process gateway."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from typing import Any

import httpx
from loguru import logger

from aoshell.errors import AosError, EvaluationError, RegistrationError
from aoshell.services.protocols import StatusBatch
from aoshell.services.wallet import Credential

OWNER_HEADER = "X-Owner"
USER_AGENT = "aoshell/0.1"
REQUEST_TIMEOUT_SECONDS = 20.0


class Gateway:
    """Async client implementing registration, evaluation, monitoring and listing."""

    def __init__(
        self,
        base_url: str,
        *,
        evaluation_timeout: float = 60.0,
        poll_seconds: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._evaluation_timeout = evaluation_timeout
        self._poll_seconds = poll_seconds
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=REQUEST_TIMEOUT_SECONDS,
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        )

    async def __aenter__(self) -> Gateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def register(self, credential: Credential, name: str) -> str:
        try:
            response = await self._client.post(
                "/processes",
                json={"owner": credential.address, "name": name},
                headers=_owner(credential),
            )
            response.raise_for_status()
            process_id = _json_object(response).get("id")
        except (httpx.HTTPError, ValueError) as exc:
            raise RegistrationError(f"could not register process {name!r}: {exc}") from exc
        if not process_id:
            raise RegistrationError(f"gateway returned no process id for {name!r}")
        logger.info("gateway.register name={} process={}", name, process_id)
        return str(process_id)

    async def list_processes(self, credential: Credential) -> str:
        try:
            response = await self._client.get(
                "/processes",
                params={"owner": credential.address},
                headers=_owner(credential),
            )
            response.raise_for_status()
            processes = _json_object(response).get("processes") or []
            if not isinstance(processes, list):
                raise ValueError("processes is not a list")
        except (httpx.HTTPError, ValueError) as exc:
            raise AosError(f"could not list processes: {exc}") from exc
        if not processes:
            return "no processes found"
        return "\n".join(
            f"{item.get('name', '-')}: {item.get('id', '-')}" for item in processes if isinstance(item, Mapping)
        )

    async def evaluate(self, code: str, process_id: str, credential: Credential) -> Mapping[str, Any]:
        try:
            message_id = await self._send(code, process_id, credential)
            return await self._read_result(process_id, message_id, credential)
        except httpx.HTTPError as exc:
            raise EvaluationError(f"evaluation failed: {exc}") from exc
        except ValueError as exc:
            raise EvaluationError(f"evaluation returned an unreadable payload: {exc}") from exc

    async def monitor(self, credential: Credential, process_id: str) -> str:
        try:
            response = await self._client.post(f"/processes/{process_id}/monitor", headers=_owner(credential))
        except httpx.HTTPError as exc:
            return f"error: could not start monitoring: {exc}"
        return _message(response, "monitoring started")

    async def unmonitor(self, credential: Credential, process_id: str) -> str:
        try:
            response = await self._client.delete(f"/processes/{process_id}/monitor", headers=_owner(credential))
        except httpx.HTTPError as exc:
            return f"error: could not stop monitoring: {exc}"
        return _message(response, "monitoring stopped")

    async def read_status(self, process_id: str, cursor: str | None) -> StatusBatch:
        params = {"after": cursor} if cursor else {}
        response = await self._client.get(f"/processes/{process_id}/outbox", params=params)
        response.raise_for_status()
        payload = _json_object(response)
        items = payload.get("messages") or []
        messages = [str(item.get("data", "")) for item in items if isinstance(item, Mapping)]
        return StatusBatch(messages=messages, cursor=payload.get("cursor") or cursor)

    async def _send(self, code: str, process_id: str, credential: Credential) -> str:
        response = await self._client.post(
            f"/processes/{process_id}/messages",
            json={"owner": credential.address, "action": "Eval", "data": code},
            headers=_owner(credential),
        )
        response.raise_for_status()
        message_id = _json_object(response).get("id")
        if not message_id:
            raise EvaluationError("gateway did not return a message id")
        return str(message_id)

    async def _read_result(self, process_id: str, message_id: str, credential: Credential) -> Mapping[str, Any]:
        deadline = time.monotonic() + self._evaluation_timeout
        while True:
            response = await self._client.get(
                f"/processes/{process_id}/results/{message_id}",
                headers=_owner(credential),
            )
            response.raise_for_status()
            if response.status_code != httpx.codes.ACCEPTED:
                return _json_object(response)
            if time.monotonic() >= deadline:
                raise EvaluationError(f"timed out waiting for result of message {message_id}")
            await asyncio.sleep(self._poll_seconds)


def _owner(credential: Credential) -> dict[str, str]:
    return {OWNER_HEADER: credential.address}


def _json_object(response: httpx.Response) -> Mapping[str, Any]:
    payload = response.json()
    if not isinstance(payload, Mapping):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    return payload


def _message(response: httpx.Response, default: str) -> str:
    if response.is_error:
        return f"error: {response.status_code} {response.text.strip()}".rstrip()
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or default
    if not isinstance(payload, Mapping):
        return default
    return str(payload.get("message") or default)
