"""Application bootstrap package."""

from .bootstrap import bootstrap

__all__ = ["bootstrap"]
