"""Pydantic models validating the JSON-RPC response envelope."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from trac_rpc.domain.value_objects import RemoteResponse, RpcErrorInfo


class ErrorEnvelope(BaseModel):
    """The ``error`` member: ``{"code": int, "message": str, "name": str}``."""

    model_config = ConfigDict(extra="ignore")

    code: int = 0
    message: str = ""
    name: str = ""


class ResponseEnvelope(BaseModel):
    """Top-level reply: ``{"error": ..., "id": ..., "result": ...}``."""

    model_config = ConfigDict(extra="ignore")

    error: ErrorEnvelope | None = None
    id: str | None = None
    result: Any = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def to_domain(self) -> RemoteResponse:
        error = None
        if self.error is not None:
            error = RpcErrorInfo(
                code=self.error.code,
                message=self.error.message,
                name=self.error.name,
            )
        return RemoteResponse(result=self.result, error=error, id=self.id)
