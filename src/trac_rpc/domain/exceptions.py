"""Domain exception hierarchy.

Every failure the client can surface derives from :class:`TracRpcError`.
Inner layers raise these; nothing in the library recovers from them.
"""

from __future__ import annotations


class TracRpcError(Exception):
    """Base exception for the entire library."""


# ── Transport ───────────────────────────────────────────────────────────────


class TransportError(TracRpcError):
    """The byte exchange failed or the reply is not a JSON-RPC envelope."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# ── Remote faults ───────────────────────────────────────────────────────────


class RemoteError(TracRpcError):
    """The server answered with a non-zero ``error.code``."""

    def __init__(self, code: int, message: str, name: str = "") -> None:
        super().__init__(f"{name}({code}): {message}")
        self.code = code
        self.message = message
        self.name = name


# ── Decoding ────────────────────────────────────────────────────────────────


class DecodeError(TracRpcError):
    """A result could not be converted into its target type."""


# ── Stub endpoints ──────────────────────────────────────────────────────────


class UnsupportedOperationError(TracRpcError, NotImplementedError):
    """The remote method exists but this client does not implement it."""

    def __init__(self, method: str) -> None:
        super().__init__(f"{method} is not supported by this client")
        self.method = method
