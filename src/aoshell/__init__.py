"""aoshell - an interactive console for remote processes."""

__version__ = "0.1.0"
