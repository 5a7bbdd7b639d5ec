"""Wire transport capability."""

from typing import Any, Protocol, runtime_checkable


type WirePayload = dict[str, Any] | list[dict[str, Any]]


@runtime_checkable
class Transport(Protocol):
    """Sends one JSON-RPC request or batch and returns the decoded reply.

    Implementations own connection pooling, timeouts and wire-level retries.
    A single request object yields a single response object; a list yields a
    list of response objects in any order. Failures that prevent a decoded
    reply raise ``TransportError``.
    """

    async def send(self, payload: WirePayload, options: Any) -> Any:
        """Send ``payload`` and return the decoded JSON reply.

        ``options`` is the caller's ``transport_options`` object, unchanged.
        """
        ...


__all__ = ["Transport", "WirePayload"]
