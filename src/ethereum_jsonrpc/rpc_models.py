"""Pydantic models for JSON-RPC requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.helpers.constants import JSONRPC_VERSION


type RequestId = int | str


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request model."""

    id: RequestId = Field(..., description="Request ID, unique within a batch")
    jsonrpc: str = Field(default=JSONRPC_VERSION, description="JSON-RPC version")
    method: str = Field(..., min_length=1, description="Method name to call")
    params: list[Any] = Field(default_factory=list, description="Method parameters")

    model_config = ConfigDict(frozen=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON object sent over the wire."""
        return self.model_dump(mode="json")


class JsonRpcError(BaseModel):
    """JSON-RPC 2.0 error object.

    ``code`` is ``None`` only for errors synthesized by this layer, such as a
    batch item the transport never answered.
    """

    code: int | None = Field(default=None, description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    data: Any = Field(default=None, description="Extra error data or request params")

    model_config = ConfigDict(extra="allow")


class JsonRpcResponse(BaseModel):
    """JSON-RPC 2.0 response model carrying either a result or an error."""

    id: RequestId | None = Field(default=None, description="Id of the answered request")
    jsonrpc: str = Field(default=JSONRPC_VERSION, description="JSON-RPC version")
    result: Any = Field(default=None, description="Result value, may be null")
    error: JsonRpcError | None = Field(default=None, description="Error object")

    model_config = ConfigDict(extra="allow")

    @property
    def is_error(self) -> bool:
        return self.error is not None


__all__ = [
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "RequestId",
]
