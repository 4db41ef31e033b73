import json

import httpx
import pytest

from aoshell.core.evaluation import Evaluator
from aoshell.errors import AosError, EvaluationError, RegistrationError
from aoshell.services.gateway import OWNER_HEADER, Gateway


def _gateway(handler, **kwargs) -> Gateway:
    return Gateway("http://gateway.test/", transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_register_returns_process_id(credential) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "pid-9"})

    async with _gateway(handler) as gateway:
        process_id = await gateway.register(credential, "default")

    assert process_id == "pid-9"
    assert seen[0].url.path == "/processes"
    assert seen[0].headers[OWNER_HEADER] == "owner-address"
    assert json.loads(seen[0].content) == {"owner": "owner-address", "name": "default"}


@pytest.mark.asyncio
async def test_register_failure_raises_registration_error(credential) -> None:
    async with _gateway(lambda request: httpx.Response(500)) as gateway:
        with pytest.raises(RegistrationError):
            await gateway.register(credential, "default")


@pytest.mark.asyncio
async def test_register_without_id_raises(credential) -> None:
    async with _gateway(lambda request: httpx.Response(200, json={})) as gateway:
        with pytest.raises(RegistrationError, match="no process id"):
            await gateway.register(credential, "default")


@pytest.mark.asyncio
async def test_evaluate_sends_then_polls_until_ready(credential) -> None:
    polls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            assert json.loads(request.content)["data"] == "1 + 1"
            return httpx.Response(200, json={"id": "msg-1"})
        assert request.url.path == "/processes/pid-1/results/msg-1"
        polls["count"] += 1
        if polls["count"] < 3:
            return httpx.Response(202)
        return httpx.Response(200, json={"output": "2", "prompt": "aos> "})

    async with _gateway(handler, poll_seconds=0) as gateway:
        payload = await gateway.evaluate("1 + 1", "pid-1", credential)

    assert payload == {"output": "2", "prompt": "aos> "}
    assert polls["count"] == 3


@pytest.mark.asyncio
async def test_evaluate_times_out(credential) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(200, json={"id": "msg-1"})
        return httpx.Response(202)

    async with _gateway(handler, evaluation_timeout=0, poll_seconds=0) as gateway:
        with pytest.raises(EvaluationError, match="timed out"):
            await gateway.evaluate("1", "pid-1", credential)


@pytest.mark.asyncio
async def test_evaluate_transport_error_becomes_evaluation_error(credential) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _gateway(handler) as gateway:
        with pytest.raises(EvaluationError, match="refused"):
            await gateway.evaluate("1", "pid-1", credential)


@pytest.mark.asyncio
async def test_monitor_and_unmonitor_return_messages(credential) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/processes/pid-1/monitor"
        if request.method == "POST":
            return httpx.Response(200, json={"message": "cron registered"})
        return httpx.Response(200, text="")

    async with _gateway(handler) as gateway:
        assert await gateway.monitor(credential, "pid-1") == "cron registered"
        assert await gateway.unmonitor(credential, "pid-1") == "monitoring stopped"


@pytest.mark.asyncio
async def test_monitor_transport_error_is_reported_as_text(credential) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _gateway(handler) as gateway:
        message = await gateway.monitor(credential, "pid-1")

    assert message.startswith("error: could not start monitoring")


@pytest.mark.asyncio
async def test_read_status_passes_cursor(credential) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params.get("after") == "c1"
        return httpx.Response(200, json={"messages": [{"data": "New message"}], "cursor": "c2"})

    async with _gateway(handler) as gateway:
        batch = await gateway.read_status("pid-1", "c1")

    assert batch.messages == ["New message"]
    assert batch.cursor == "c2"


@pytest.mark.asyncio
async def test_list_processes_formats_lines(credential) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params.get("owner") == "owner-address"
        return httpx.Response(200, json={"processes": [{"name": "default", "id": "pid-1"}]})

    async with _gateway(handler) as gateway:
        assert await gateway.list_processes(credential) == "default: pid-1"


@pytest.mark.asyncio
async def test_list_processes_failure_raises(credential) -> None:
    async with _gateway(lambda request: httpx.Response(503)) as gateway:
        with pytest.raises(AosError, match="could not list processes"):
            await gateway.list_processes(credential)


@pytest.mark.asyncio
async def test_register_with_non_object_body_raises_registration_error(credential) -> None:
    async with _gateway(lambda request: httpx.Response(200, json=["pid-9"])) as gateway:
        with pytest.raises(RegistrationError, match="expected a JSON object"):
            await gateway.register(credential, "default")


def _scalar_result(request: httpx.Request) -> httpx.Response:
    if request.method == "POST":
        return httpx.Response(200, json={"id": "m1"})
    return httpx.Response(200, json="2")


@pytest.mark.asyncio
async def test_evaluate_with_non_object_result_raises_evaluation_error(credential) -> None:
    async with _gateway(_scalar_result) as gateway:
        with pytest.raises(EvaluationError, match="unreadable payload"):
            await gateway.evaluate("1+1", "pid", credential)


@pytest.mark.asyncio
async def test_evaluator_turns_non_object_result_into_output(harness, credential) -> None:
    async with _gateway(_scalar_result) as gateway:
        result = await Evaluator(gateway, harness.renderer).evaluate("1+1", "pid", credential)

    assert result.output.startswith("evaluation returned an unreadable payload")
    assert not result.is_error


@pytest.mark.asyncio
async def test_monitor_with_non_object_body_uses_default_text(credential) -> None:
    async with _gateway(lambda request: httpx.Response(200, json="ok")) as gateway:
        assert await gateway.monitor(credential, "pid-1") == "monitoring started"
        assert await gateway.unmonitor(credential, "pid-1") == "monitoring stopped"


@pytest.mark.asyncio
async def test_list_processes_with_null_body_raises(credential) -> None:
    async with _gateway(lambda request: httpx.Response(200, content=b"null")) as gateway:
        with pytest.raises(AosError, match="could not list processes"):
            await gateway.list_processes(credential)


@pytest.mark.asyncio
async def test_read_status_skips_non_object_messages(credential) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"messages": ["stray", {"data": "hello"}], "cursor": "c3"})

    async with _gateway(handler) as gateway:
        batch = await gateway.read_status("pid-1", None)

    assert batch.messages == ["hello"]
    assert batch.cursor == "c3"
