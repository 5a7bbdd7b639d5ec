"""Submit requests through the configured transport and decode replies."""

from collections.abc import Iterable, Mapping

from typing import Any

from pydantic import ValidationError

from src.ethereum_jsonrpc.config import JsonRpcNamedArguments, ensure_named_arguments
from src.ethereum_jsonrpc.errors import NodeError, TransportError
from src.ethereum_jsonrpc.rpc_models import JsonRpcRequest, JsonRpcResponse
from src.helpers.logging import get_logger


logger = get_logger(__name__)


def _parse_response(item: Any) -> JsonRpcResponse:
    try:
        return JsonRpcResponse.model_validate(item)
    except ValidationError as e:
        msg = f"Malformed JSON-RPC response: {item!r}"
        raise TransportError(msg) from e


async def json_rpc(
    request: JsonRpcRequest | Iterable[JsonRpcRequest],
    named_arguments: JsonRpcNamedArguments | Mapping[str, Any],
) -> Any:
    """Send a single request or a batch through the configured transport.

    Args:
        request: One request, or an iterable of requests sent as a batch
        named_arguments: Transport, transport options and variant

    Returns:
        For a single request, its ``result``. For a batch, the list of
        ``JsonRpcResponse`` in delivery order.

    Raises:
        ConfigurationError: If named arguments are incomplete
        TransportError: If the transport fails or the reply is malformed
        NodeError: If a single request, or the batch as a whole, is rejected
    """
    arguments = ensure_named_arguments(named_arguments)
    transport = arguments.transport
    options = arguments.transport_options

    if isinstance(request, JsonRpcRequest):
        logger.debug("Sending %s (id=%s)", request.method, request.id)
        reply = await transport.send(request.to_wire(), options)
        if not isinstance(reply, dict):
            msg = f"Expected a single JSON-RPC response, got {type(reply).__name__}"
            raise TransportError(msg)
        response = _parse_response(reply)
        if response.error is not None:
            raise NodeError(response.error)
        return response.result

    batch = list(request)
    if not batch:
        return []

    logger.debug("Sending batch of %d %s request(s)", len(batch), batch[0].method)
    reply = await transport.send([item.to_wire() for item in batch], options)

    # Some nodes answer a rejected batch with one error object
    if isinstance(reply, dict):
        response = _parse_response(reply)
        if response.error is not None:
            raise NodeError(response.error)
    if not isinstance(reply, list):
        msg = f"Expected a batch JSON-RPC response, got {type(reply).__name__}"
        raise TransportError(msg)

    return [_parse_response(item) for item in reply]


__all__ = ["json_rpc"]
