"""Trac JSON-RPC adapter — implements the RpcTransport port over HTTP POST."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from trac_rpc.domain.exceptions import RemoteError, TransportError
from trac_rpc.domain.value_objects import RemoteCall, RemoteResponse, TracUrl
from trac_rpc.infrastructure.schemas import ResponseEnvelope

logger = logging.getLogger(__name__)


class JsonRpcAdapter:
    """Concrete ``RpcTransport`` backed by a blocking ``httpx.Client``.

    One call is exactly one POST; nothing is retried. The adapter keeps no
    per-call state, so a single instance may serve concurrent callers as
    long as the supplied ``httpx.Client`` does.
    """

    def __init__(self, client: httpx.Client, url: TracUrl) -> None:
        self._client = client
        self._url = url
        self._headers: dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": "trac-rpc/1.0",
        }

    @property
    def url(self) -> TracUrl:
        return self._url

    def send(self, method: str, params: Sequence[Any] = ()) -> RemoteResponse:
        """POST one request envelope and return the parsed response.

        A fault in the envelope takes precedence over its result and is
        raised as :class:`RemoteError`.
        """
        call = RemoteCall(method=method, params=tuple(params))
        logger.debug("POST %s method=%s", self._url.redacted, method)
        try:
            resp = self._client.post(
                self._url.raw, json=call.to_wire(), headers=self._headers
            )
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Network error calling {method} on {self._url.redacted}: {exc}"
            ) from exc

        response = self._parse(method, resp)
        if response.failed:
            assert response.error is not None
            logger.warning(
                "%s failed: %s(%d): %s",
                method,
                response.error.name,
                response.error.code,
                response.error.message,
            )
            raise RemoteError(
                code=response.error.code,
                message=response.error.message,
                name=response.error.name,
            )
        return response

    def close(self) -> None:
        self._client.close()

    def _parse(self, method: str, resp: httpx.Response) -> RemoteResponse:
        """Translate an HTTP response into an envelope, or raise TransportError.

        Trac reports RPC faults with HTTP 500 and a JSON body, so the status
        code alone does not decide failure.
        """
        try:
            body = resp.json()
        except ValueError as exc:
            if resp.is_error:
                raise TransportError(
                    f"{method}: server returned HTTP {resp.status_code}",
                    status_code=resp.status_code,
                ) from exc
            raise TransportError(
                f"{method}: response body is not valid JSON", status_code=resp.status_code
            ) from exc

        if not isinstance(body, dict):
            raise TransportError(
                f"{method}: expected a JSON object envelope, got {type(body).__name__}",
                status_code=resp.status_code,
            )

        try:
            envelope = ResponseEnvelope.model_validate(body)
        except ValidationError as exc:
            raise TransportError(
                f"{method}: malformed response envelope: {exc}",
                status_code=resp.status_code,
            ) from exc

        response = envelope.to_domain()
        if resp.is_error and not response.failed:
            raise TransportError(
                f"{method}: server returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        return response
