"""One-time session setup before the input loop starts."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from aoshell import __version__
from aoshell.cli.live import start_live_feed
from aoshell.cli.render import CONNECTING_LABEL, Renderer
from aoshell.core.evaluation import Evaluator
from aoshell.core.session import DEFAULT_PROMPT, Session
from aoshell.services.loaders import FILE_DIRECTIVE
from aoshell.services.protocols import CredentialProvider, Loader, ProcessRegistry, StatusSource

CONNECT_PROBE = '"Loading..."'


async def bootstrap(
    *,
    credentials: CredentialProvider,
    registry: ProcessRegistry,
    evaluator: Evaluator,
    status: StatusSource,
    file_loader: Loader,
    renderer: Renderer,
    process_name: str,
    load_paths: Sequence[Path] = (),
    monitor_poll_seconds: float = 2.0,
) -> Session:
    """Acquire a credential, bind a process, connect, and replay startup loads.

    `CredentialError` and `RegistrationError` propagate to the caller; no
    session exists until both steps succeed.
    """
    credential = credentials.acquire()
    process_id = await registry.register(credential, process_name)
    renderer.version(__version__, process_id)

    connected = await evaluator.evaluate(CONNECT_PROBE, process_id, credential, label=CONNECTING_LABEL)
    session = Session(process_id=process_id, credential=credential, prompt=connected.prompt or DEFAULT_PROMPT)
    logger.info("bootstrap.connected process={} prompt={!r}", process_id, session.prompt)

    await replay_loads(session, load_paths, evaluator=evaluator, file_loader=file_loader, renderer=renderer)

    session.monitor = start_live_feed(process_id, status, renderer, poll_seconds=monitor_poll_seconds)
    renderer.bind_history(session.history)
    return session


async def replay_loads(
    session: Session,
    load_paths: Sequence[Path],
    *,
    evaluator: Evaluator,
    file_loader: Loader,
    renderer: Renderer,
) -> None:
    """Evaluate startup files as one submission, as if typed via `.load`."""
    chunks: list[str] = []
    for path in load_paths:
        loaded = file_loader.expand(f"{FILE_DIRECTIVE} {path}")
        if not loaded.ok:
            renderer.error(loaded.error or "")
            continue
        chunks.append(loaded.code or "")
    code = "\n".join(chunks)
    if not code:
        return
    result = await evaluator.evaluate(code, session.process_id, session.credential)
    evaluator.show(result)
    session.update_prompt(result.prompt)
