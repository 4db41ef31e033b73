"""CLI main module for aoshell."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from loguru import logger

from aoshell import __version__
from aoshell.app.runtime import AppRuntime
from aoshell.cli.render import Renderer, create_cli_renderer
from aoshell.config import load_settings
from aoshell.errors import AosError
from aoshell.logging_utils import configure_logging
from aoshell.services.loaders import export_blueprints

INTERRUPTED_EXIT_CODE = 130

app = typer.Typer(
    name="aos",
    help="Interactive console for a remote process.",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.command()
def main(
    name: str | None = typer.Argument(None, help="Process name to register or bind"),
    wallet: Path | None = typer.Option(None, "--wallet", help="Path to a JSON web key wallet"),  # noqa: B008
    list_: bool = typer.Option(False, "--list", help="List your processes and exit"),
    get_blueprints: Path | None = typer.Option(  # noqa: B008
        None, "--get-blueprints", help="Copy bundled blueprints into a directory and exit"
    ),
    version: bool = typer.Option(False, "--version", help="Show the client version and exit"),
    load: list[Path] | None = typer.Option(None, "--load", help="Files to evaluate before the first prompt"),  # noqa: B008
) -> None:
    """Connect to a process and start the REPL."""
    settings = load_settings(wallet_path=wallet)
    configure_logging(settings.log_level)
    renderer = create_cli_renderer()

    if get_blueprints is not None:
        copied = export_blueprints(settings.blueprints_dir, get_blueprints)
        for path in copied:
            renderer.output(f"wrote {path}")
        raise typer.Exit(0)
    if version:
        renderer.version(__version__)
        raise typer.Exit(0)

    renderer.splash()
    try:
        asyncio.run(_run(AppRuntime(settings, renderer), renderer, name, load or [], list_))
    except AosError as exc:
        logger.debug("startup.failed error={}", exc)
        renderer.error(str(exc))
        raise typer.Exit(1) from exc
    except KeyboardInterrupt as exc:
        # Ctrl-C outside the prompt, e.g. while an evaluation is in flight.
        logger.debug("repl.interrupted")
        renderer.exit_notice()
        raise typer.Exit(INTERRUPTED_EXIT_CODE) from exc


async def _run(
    runtime: AppRuntime,
    renderer: Renderer,
    name: str | None,
    load: list[Path],
    list_only: bool,
) -> None:
    async with runtime:
        if list_only:
            renderer.output(await runtime.list_processes())
            return
        await runtime.run(name, load)
