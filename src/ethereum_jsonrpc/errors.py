"""Error taxonomy for the Ethereum JSON-RPC layer."""

from typing import Any

from src.ethereum_jsonrpc.rpc_models import JsonRpcError


class EthereumJSONRPCError(Exception):
    """Base class for every error raised by the JSON-RPC layer."""


class InvalidQuantityError(EthereumJSONRPCError, ValueError):
    """A wire quantity is not "0x" followed by hexadecimal digits."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Invalid quantity: {value!r}")


class ConfigurationError(EthereumJSONRPCError, ValueError):
    """Caller supplied missing or contradictory options."""


class TransportError(EthereumJSONRPCError):
    """The wire transport failed before a JSON-RPC response was decoded.

    Attributes:
        reason: The underlying exception or a short description
    """

    def __init__(self, reason: Any) -> None:
        self.reason = reason
        super().__init__(f"Transport error: {reason}")


class NodeError(EthereumJSONRPCError):
    """A well-formed JSON-RPC error object returned by the node."""

    def __init__(self, error: JsonRpcError) -> None:
        self.error = error
        super().__init__(f"RPC error {error.code}: {error.message}")

    @property
    def code(self) -> int | None:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def data(self) -> Any:
        return self.error.data


class InvalidTagError(NodeError):
    """The node rejected a block tag (wire code -32602)."""


class BatchError(EthereumJSONRPCError):
    """One or more items of an all-or-nothing batch failed.

    Attributes:
        errors: Every per-item error in request order, each annotated with
            the logical params of the request that produced it
    """

    def __init__(self, errors: list[JsonRpcError]) -> None:
        self.errors = errors
        summary = "; ".join(f"{error.code}: {error.message}" for error in errors[:3])
        if len(errors) > 3:
            summary += f"; ... ({len(errors) - 3} more)"
        super().__init__(f"{len(errors)} batch request(s) failed: {summary}")


class UnexpectedResponseIdError(EthereumJSONRPCError):
    """A batch response carried an id that was never requested."""

    def __init__(self, response_id: Any) -> None:
        self.response_id = response_id
        super().__init__(f"Response id {response_id!r} does not match any request")


__all__ = [
    "BatchError",
    "ConfigurationError",
    "EthereumJSONRPCError",
    "InvalidQuantityError",
    "InvalidTagError",
    "NodeError",
    "TransportError",
    "UnexpectedResponseIdError",
]
