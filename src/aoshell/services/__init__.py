"""Capabilities consumed by the REPL and their default adapters."""

from .gateway import Gateway
from .loaders import BlueprintLoader, FileLoader, export_blueprints
from .protocols import LoadResult, StatusBatch
from .wallet import Credential, WalletProvider

__all__ = [
    "BlueprintLoader",
    "Credential",
    "FileLoader",
    "Gateway",
    "LoadResult",
    "StatusBatch",
    "WalletProvider",
    "export_blueprints",
]
