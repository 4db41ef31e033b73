"""Read, dispatch, display, repeat."""

from __future__ import annotations

from loguru import logger

from aoshell.cli.render import Renderer
from aoshell.core.commands import EXIT
from aoshell.core.dispatcher import Dispatcher
from aoshell.core.session import Session


class InputLoop:
    """Drive one session until `.exit` terminates it."""

    def __init__(self, session: Session, dispatcher: Dispatcher, renderer: Renderer) -> None:
        self.session = session
        self._dispatcher = dispatcher
        self._renderer = renderer

    async def run(self) -> None:
        session = self.session
        while not session.terminated:
            line = await self._read()
            if not line.strip():
                self._renderer.placeholder()
                continue
            session.history.append(line)
            await self._dispatcher.dispatch(session, line)
        logger.info("repl.exit process={} lines={}", session.process_id, len(session.history))

    async def _read(self) -> str:
        try:
            return await self._renderer.read_line(self.session.current_prompt)
        except (KeyboardInterrupt, EOFError):
            # Closing the input stream behaves like `.exit`, even mid-editor.
            self.session.cancel_editor()
            return EXIT
