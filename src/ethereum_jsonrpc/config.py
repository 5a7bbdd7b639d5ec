"""Named arguments selecting the transport and variant for each call."""

from collections.abc import Mapping

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.ethereum_jsonrpc.errors import ConfigurationError
from src.ethereum_jsonrpc.transport import Transport
from src.ethereum_jsonrpc.variant import Variant
from src.helpers.config import (
    get_eth_rpc_url,
    get_eth_ws_url,
    get_jsonrpc_transport,
    get_jsonrpc_variant,
)
from src.helpers.logging import get_logger


logger = get_logger(__name__)


class JsonRpcNamedArguments(BaseModel):
    """Transport, its options and the node variant used by one call.

    ``transport_options`` is opaque to this layer and passed to the
    transport untouched.
    """

    transport: Transport = Field(..., description="Wire transport implementation")
    transport_options: Any = Field(
        ..., description="Options passed through to the transport"
    )
    variant: Variant = Field(..., description="Node variant implementation")

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)


def ensure_named_arguments(
    named_arguments: JsonRpcNamedArguments | Mapping[str, Any],
) -> JsonRpcNamedArguments:
    """Validate named arguments before any network attempt.

    Raises:
        ConfigurationError: If transport, transport_options or variant is
            missing or of the wrong kind
    """
    if isinstance(named_arguments, JsonRpcNamedArguments):
        return named_arguments
    if not isinstance(named_arguments, Mapping):
        msg = f"Named arguments must be a mapping, got {type(named_arguments).__name__}"
        raise ConfigurationError(msg)
    try:
        return JsonRpcNamedArguments(**named_arguments)
    except ValidationError as e:
        missing = [".".join(map(str, err["loc"])) for err in e.errors()]
        msg = f"Invalid JSON-RPC named arguments: {', '.join(missing)}"
        raise ConfigurationError(msg) from e


def named_arguments_from_env(
    *,
    transport: str | None = None,
    variant: str | None = None,
    url: str | None = None,
) -> JsonRpcNamedArguments:
    """Build named arguments from ETH_JSONRPC_* and ETH_RPC_URL/ETH_WS_URL.

    Example:
        ```python
        from src.ethereum_jsonrpc.client import fetch_block_number_by_tag
        from src.ethereum_jsonrpc.config import named_arguments_from_env

        arguments = named_arguments_from_env()
        latest = await fetch_block_number_by_tag("latest", arguments)
        ```
    """
    # Implementations import the client helpers, which import this module
    from src.ethereum_jsonrpc.geth import GethVariant
    from src.ethereum_jsonrpc.http import HTTPTransport
    from src.ethereum_jsonrpc.parity import ParityVariant
    from src.ethereum_jsonrpc.websocket import WebSocketTransport

    try:
        transport_name = get_jsonrpc_transport(transport)
        variant_name = get_jsonrpc_variant(variant)
        if transport_name == "websocket":
            selected_transport: Transport = WebSocketTransport(get_eth_ws_url(url))
        else:
            selected_transport = HTTPTransport(get_eth_rpc_url(url))
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    selected_variant: Variant = (
        GethVariant() if variant_name == "geth" else ParityVariant()
    )
    logger.info("Using %s transport with %s variant", transport_name, variant_name)

    return JsonRpcNamedArguments(
        transport=selected_transport,
        transport_options={},
        variant=selected_variant,
    )


__all__ = [
    "JsonRpcNamedArguments",
    "ensure_named_arguments",
    "named_arguments_from_env",
]
