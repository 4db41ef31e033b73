import io

from rich.console import Console

from aoshell.cli.render import EDITOR_BANNER, EMPTY_PLACEHOLDER, Renderer, SessionHistory


def _renderer() -> tuple[Renderer, io.StringIO]:
    buffer = io.StringIO()
    return Renderer(Console(file=buffer, force_terminal=False, width=120)), buffer


def test_output_is_printed_verbatim() -> None:
    renderer, buffer = _renderer()

    renderer.output("[not markup] 1 + 1")

    assert buffer.getvalue() == "[not markup] 1 + 1\n"


def test_error_text_is_escaped() -> None:
    renderer, buffer = _renderer()

    renderer.error("bad [red] token")

    assert buffer.getvalue() == "bad [red] token\n"


def test_placeholder_and_banner() -> None:
    renderer, buffer = _renderer()

    renderer.placeholder()
    renderer.editor_banner()

    assert buffer.getvalue().splitlines() == [EMPTY_PLACEHOLDER, EDITOR_BANNER]


def test_session_history_recalls_newest_first() -> None:
    lines = ["first", "second"]
    history = SessionHistory(lines)

    assert list(history.load_history_strings()) == ["second", "first"]

    history.store_string("third")
    assert lines == ["first", "second"]
