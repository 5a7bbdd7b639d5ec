"""Common configuration constants used across the JSON-RPC layer."""

# JSON-RPC Protocol Constants
JSONRPC_VERSION = "2.0"
"""Protocol version marker attached to every request"""

INVALID_PARAMS_CODE = -32602
"""JSON-RPC error code returned for invalid method parameters"""

BLOCK_TAGS = ("earliest", "latest", "pending")
"""Logical block selectors accepted in place of a block number"""

# HTTP and Network Constants
DEFAULT_TIMEOUT = 60.0
"""Default request timeout in seconds"""

CONNECTION_TIMEOUT = 10.0
"""Timeout for establishing connections"""

WEBSOCKET_MAX_SIZE = 2**24
"""Largest WebSocket frame accepted from the node (16 MiB)"""

# Retry Configuration
MAX_RETRIES = 3
"""Default maximum number of wire-level attempts"""

RETRY_BASE_DELAY = 1.0
"""Base delay for exponential backoff in seconds"""

RETRY_MAX_DELAY = 30.0
"""Maximum delay between retries in seconds"""

# HTTP Connection Pooling
MAX_KEEPALIVE_CONNECTIONS = 5
"""Maximum number of keepalive connections in pool"""

MAX_CONNECTIONS = 10
"""Maximum total number of connections"""


__all__ = [
    "BLOCK_TAGS",
    "CONNECTION_TIMEOUT",
    "DEFAULT_TIMEOUT",
    "INVALID_PARAMS_CODE",
    "JSONRPC_VERSION",
    "MAX_CONNECTIONS",
    "MAX_KEEPALIVE_CONNECTIONS",
    "MAX_RETRIES",
    "RETRY_BASE_DELAY",
    "RETRY_MAX_DELAY",
    "WEBSOCKET_MAX_SIZE",
]
