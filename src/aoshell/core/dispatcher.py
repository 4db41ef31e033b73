"""Route one input line to a meta-command or to evaluation."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from aoshell.cli.render import Renderer
from aoshell.core.commands import RESUME_AFTER_BLUEPRINT, RESUME_AFTER_FILE, Action, classify
from aoshell.core.evaluation import Evaluator
from aoshell.core.session import Session
from aoshell.services.protocols import Loader, MonitorCommands


@dataclass(frozen=True)
class Capabilities:
    """External capabilities reachable from the REPL."""

    evaluator: Evaluator
    monitor_commands: MonitorCommands
    file_loader: Loader
    blueprint_loader: Loader


class Dispatcher:
    """Apply the transition table to one line of input."""

    def __init__(self, capabilities: Capabilities, renderer: Renderer) -> None:
        self._caps = capabilities
        self._renderer = renderer

    async def dispatch(self, session: Session, line: str) -> Action:
        action = classify(session.mode, line)
        logger.debug("repl.dispatch mode={} action={}", session.mode.value, action.value)

        if action is Action.HELP:
            self._renderer.repl_help()
            return action
        if action is Action.MONITOR:
            self._renderer.output(await self._caps.monitor_commands.monitor(session.credential, session.process_id))
            return action
        if action is Action.UNMONITOR:
            self._renderer.output(await self._caps.monitor_commands.unmonitor(session.credential, session.process_id))
            return action

        while action in (Action.LOAD_BLUEPRINT, Action.LOAD_FILE):
            if action is Action.LOAD_BLUEPRINT:
                loader, resume = self._caps.blueprint_loader, RESUME_AFTER_BLUEPRINT
            else:
                loader, resume = self._caps.file_loader, RESUME_AFTER_FILE
            loaded = loader.expand(line)
            if not loaded.ok:
                self._renderer.output(loaded.error or "")
                return action
            line = loaded.code or ""
            action = classify(session.mode, line, start=resume)

        return await self._apply(session, action, line)

    async def _apply(self, session: Session, action: Action, line: str) -> Action:
        if action is Action.ENTER_EDITOR:
            if session.monitor is not None:
                session.monitor.stop()
            session.enter_editor()
            self._renderer.editor_banner()
            return action
        if action is Action.CANCEL_EDITOR:
            session.cancel_editor()
            if session.monitor is not None:
                session.monitor.start()
            return action
        if action is Action.BUFFER_LINE:
            session.append_to_buffer(line)
            return action
        if action is Action.EXIT:
            if session.monitor is not None:
                session.monitor.stop()
            self._renderer.exit_notice()
            session.terminate()
            return action
        if action is Action.SUBMIT_BUFFER:
            line = session.take_buffer()

        result = await self._caps.evaluator.evaluate(
            line,
            session.process_id,
            session.credential,
            monitor=session.monitor,
        )
        self._caps.evaluator.show(result)
        session.update_prompt(result.prompt)
        return action
