"""WebSocket transport for JSON-RPC."""

import asyncio
import json
from collections.abc import Mapping

from typing import Any

from websockets.asyncio.client import connect
from websockets.exceptions import WebSocketException

from src.ethereum_jsonrpc.errors import ConfigurationError, TransportError
from src.ethereum_jsonrpc.transport import WirePayload
from src.helpers.constants import CONNECTION_TIMEOUT, DEFAULT_TIMEOUT, WEBSOCKET_MAX_SIZE
from src.helpers.logging import get_logger


logger = get_logger(__name__)


class WebSocketTransport:
    """Sends each request or batch over its own WebSocket connection.

    A connection per ``send`` keeps request ids of independent batches from
    colliding on a shared socket. Per-call ``options`` may override
    ``timeout``.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        open_timeout: float = CONNECTION_TIMEOUT,
        max_size: int = WEBSOCKET_MAX_SIZE,
    ) -> None:
        """Initialize WebSocket transport.

        Args:
            url: ws:// or wss:// endpoint URL
            timeout: Seconds to wait for the reply frame
            open_timeout: Seconds to wait for the opening handshake
            max_size: Largest accepted reply frame in bytes

        Raises:
            ConfigurationError: If url is empty
        """
        if not url:
            msg = "WebSocket URL cannot be empty"
            raise ConfigurationError(msg)

        self.url = url
        self.timeout = timeout
        self.open_timeout = open_timeout
        self.max_size = max_size

    async def send(self, payload: WirePayload, options: Mapping[str, Any]) -> Any:
        """Send the payload as one text frame and decode the reply frame.

        Raises:
            TransportError: On connection failure, timeout, a closed
                connection or a reply that is not JSON
        """
        timeout = options.get("timeout", self.timeout)
        try:
            async with connect(
                self.url, open_timeout=self.open_timeout, max_size=self.max_size
            ) as websocket:
                await websocket.send(json.dumps(payload))
                message = await asyncio.wait_for(websocket.recv(), timeout=timeout)
        except TimeoutError as e:
            msg = f"Timed out waiting for {self.url}"
            raise TransportError(msg) from e
        except (OSError, WebSocketException) as e:
            logger.warning("WebSocket error talking to %s: %s", self.url, e)
            raise TransportError(e) from e

        try:
            return json.loads(message)
        except ValueError as e:
            msg = f"Message from {self.url} is not JSON: {str(message)[:200]}"
            raise TransportError(msg) from e


__all__ = ["WebSocketTransport"]
