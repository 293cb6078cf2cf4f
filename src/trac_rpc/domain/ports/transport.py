"""Port: RPC transport — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from trac_rpc.domain.value_objects import RemoteResponse


class RpcTransport(Protocol):
    """Abstract contract for one blocking request/response round trip."""

    def send(self, method: str, params: Sequence[Any] = ()) -> RemoteResponse:
        """Issue ``method`` with wire-encoded ``params`` and return the envelope.

        Raises ``TransportError`` on I/O or envelope failures and
        ``RemoteError`` when the envelope carries a fault.
        """
        ...

    def close(self) -> None:
        """Release underlying HTTP resources."""
        ...
