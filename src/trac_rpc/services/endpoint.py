"""Shared plumbing for the per-namespace endpoint facades."""

from __future__ import annotations

from typing import Any, NoReturn

from trac_rpc.domain.exceptions import UnsupportedOperationError
from trac_rpc.domain.ports.transport import RpcTransport
from trac_rpc.services.codec import encode_param
from trac_rpc.services.record_decoder import expect_str_list


class Endpoint:
    """Base for facades: encode params, send, hand back the raw result."""

    def __init__(self, transport: RpcTransport) -> None:
        self._transport = transport

    def _call(self, method: str, *params: Any) -> Any:
        response = self._transport.send(method, [encode_param(p) for p in params])
        return response.result

    def _names(self, method: str) -> list[str]:
        """For endpoints that list names, e.g. ``ticket.component.getAll``."""
        return expect_str_list(self._call(method), method)

    @staticmethod
    def _unsupported(method: str) -> NoReturn:
        raise UnsupportedOperationError(method)
