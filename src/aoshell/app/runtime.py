"""Application runtime wiring."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from aoshell.cli.live import LiveFeed
from aoshell.cli.render import Renderer
from aoshell.config import Settings
from aoshell.core import Capabilities, Dispatcher, Evaluator, InputLoop
from aoshell.services import BlueprintLoader, FileLoader, Gateway, WalletProvider

from .bootstrap import bootstrap


class AppRuntime:
    """Own the gateway client and assemble the REPL around it."""

    def __init__(
        self,
        settings: Settings,
        renderer: Renderer,
        *,
        gateway: Gateway | None = None,
    ) -> None:
        self.settings = settings
        self.renderer = renderer
        self.credentials = WalletProvider(settings.resolve_wallet())
        self.gateway = gateway or Gateway(
            settings.gateway_url,
            evaluation_timeout=settings.evaluation_timeout,
            poll_seconds=settings.result_poll_seconds,
        )
        self.evaluator = Evaluator(self.gateway, renderer, verbose=settings.debug)
        self.file_loader = FileLoader()
        self.blueprint_loader = BlueprintLoader(settings.blueprints_dir)

    async def __aenter__(self) -> AppRuntime:
        await self.gateway.__aenter__()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.gateway.__aexit__(*exc_info)

    def build_dispatcher(self) -> Dispatcher:
        capabilities = Capabilities(
            evaluator=self.evaluator,
            monitor_commands=self.gateway,
            file_loader=self.file_loader,
            blueprint_loader=self.blueprint_loader,
        )
        return Dispatcher(capabilities, self.renderer)

    async def list_processes(self) -> str:
        return await self.gateway.list_processes(self.credentials.acquire())

    async def run(self, process_name: str | None = None, load_paths: Sequence[Path] = ()) -> None:
        session = await bootstrap(
            credentials=self.credentials,
            registry=self.gateway,
            evaluator=self.evaluator,
            status=self.gateway,
            file_loader=self.file_loader,
            renderer=self.renderer,
            process_name=process_name or self.settings.process_name,
            load_paths=load_paths,
            monitor_poll_seconds=self.settings.monitor_poll_seconds,
        )
        try:
            await InputLoop(session, self.build_dispatcher(), self.renderer).run()
        finally:
            if isinstance(session.monitor, LiveFeed):
                await session.monitor.aclose()
