"""Application-level exception types for aoshell."""

from __future__ import annotations


class AosError(Exception):
    """Base exception for aoshell."""


class CredentialError(AosError):
    """Raised when no usable wallet or key material can be loaded."""


class RegistrationError(AosError):
    """Raised when the target process cannot be created or bound."""


class LoadError(AosError):
    """Raised when a load directive is malformed or its source is unreadable."""


class EvaluationError(AosError):
    """Raised when a remote evaluation fails to sign, transmit, or resolve."""
