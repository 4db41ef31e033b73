"""Wallet loading and owner address derivation."""

from __future__ import annotations

import base64
import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from aoshell.errors import CredentialError


@dataclass(frozen=True)
class Credential:
    """Signing key material plus the owner address it proves."""

    address: str
    key: dict[str, Any] = field(repr=False, default_factory=dict)


def owner_address(modulus: str) -> str:
    """Derive the owner address from a base64url RSA modulus."""
    padded = modulus + "=" * (-len(modulus) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except ValueError as exc:
        raise CredentialError("wallet modulus is not valid base64url") from exc
    digest = hashlib.sha256(raw).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


class WalletProvider:
    """Read a JSON web key from disk."""

    def __init__(self, path: Path) -> None:
        self.path = path.expanduser()

    def acquire(self) -> Credential:
        if not self.path.is_file():
            raise CredentialError(f"wallet not found: {self.path}")
        try:
            key = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CredentialError(f"could not read wallet {self.path}: {exc}") from exc
        if not isinstance(key, dict) or not isinstance(key.get("n"), str):
            raise CredentialError(f"wallet {self.path} is not an RSA JSON web key")
        address = owner_address(key["n"])
        logger.debug("wallet.loaded path={} address={}", self.path, address)
        return Credential(address=address, key=key)
