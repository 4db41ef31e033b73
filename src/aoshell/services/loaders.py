"""Load directive expansion for files and blueprints."""

from __future__ import annotations

import shlex
import shutil
from pathlib import Path

from loguru import logger

from aoshell.errors import LoadError
from aoshell.services.protocols import LoadResult

FILE_DIRECTIVE = ".load"
BLUEPRINT_DIRECTIVE = ".load-blueprint"
BLUEPRINT_SUFFIX = ".lua"


def _directive_args(line: str, directive: str) -> list[str]:
    rest = line[len(directive) :]
    try:
        return shlex.split(rest)
    except ValueError as exc:
        raise LoadError(f"load error: {exc}") from exc


def _read_source(path: Path) -> str:
    if not path.is_file():
        raise LoadError(f"file not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"could not read {path}: {exc}") from exc


class FileLoader:
    """Expand `.load <path> [<path> ...]` into the contents of the files."""

    def __init__(self, base: Path | None = None) -> None:
        self._base = base

    def expand(self, line: str) -> LoadResult:
        try:
            return LoadResult.loaded(self._expand(line))
        except LoadError as exc:
            logger.debug("load.failed line={} error={}", line, exc)
            return LoadResult.failed(str(exc))

    def _expand(self, line: str) -> str:
        paths = _directive_args(line, FILE_DIRECTIVE)
        if not paths:
            raise LoadError("load error: no file path given")
        return "\n".join(_read_source(self._resolve(raw)) for raw in paths)

    def _resolve(self, raw: str) -> Path:
        path = Path(raw).expanduser()
        if self._base is not None and not path.is_absolute():
            return self._base / path
        return path


class BlueprintLoader:
    """Expand `.load-blueprint <name>` into the named blueprint source."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def names(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(path.stem for path in self.directory.glob(f"*{BLUEPRINT_SUFFIX}"))

    def expand(self, line: str) -> LoadResult:
        try:
            return LoadResult.loaded(self._expand(line))
        except LoadError as exc:
            logger.debug("blueprint.failed line={} error={}", line, exc)
            return LoadResult.failed(str(exc))

    def _expand(self, line: str) -> str:
        args = _directive_args(line, BLUEPRINT_DIRECTIVE)
        if len(args) != 1:
            raise LoadError("blueprint error: expected exactly one blueprint name")
        name = args[0].removesuffix(BLUEPRINT_SUFFIX)
        if "/" in name or "\\" in name or name.startswith("."):
            raise LoadError(f"blueprint error: invalid name {name!r}")
        path = self.directory / f"{name}{BLUEPRINT_SUFFIX}"
        if not path.is_file():
            available = ", ".join(self.names()) or "none"
            raise LoadError(f"blueprint not found: {name} (available: {available})")
        return _read_source(path)


def export_blueprints(source: Path, target: Path) -> list[Path]:
    """Copy every blueprint under `source` into `target`."""
    target.mkdir(parents=True, exist_ok=True)
    copied: list[Path] = []
    for path in sorted(source.glob(f"*{BLUEPRINT_SUFFIX}")):
        destination = target / path.name
        shutil.copyfile(path, destination)
        copied.append(destination)
    logger.info("blueprints.exported count={} target={}", len(copied), target)
    return copied
