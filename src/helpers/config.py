"""Configuration management and environment variable utilities."""

import os

from dotenv import load_dotenv


# Load environment variables from .env file
load_dotenv()

SUPPORTED_TRANSPORTS = ("http", "websocket")
SUPPORTED_VARIANTS = ("parity", "geth")


def get_optional_env(key: str, default: str | None = None) -> str | None:
    """Get an optional environment variable with a default value."""
    return os.getenv(key, default)


def get_eth_rpc_url(rpc_url: str | None = None) -> str:
    """Get Ethereum HTTP JSON-RPC URL from parameter or environment.

    Args:
        rpc_url: Optional RPC URL to use directly

    Returns:
        Ethereum RPC URL

    Raises:
        ValueError: If RPC URL is not provided and ETH_RPC_URL env var is not set
    """
    if rpc_url:
        return rpc_url

    env_rpc_url = os.getenv("ETH_RPC_URL")
    if not env_rpc_url:
        msg = "ETH_RPC_URL must be provided or set in environment variables"
        raise ValueError(msg)

    return env_rpc_url


def get_eth_ws_url(ws_url: str | None = None) -> str:
    """Get Ethereum WebSocket URL from parameter or environment.

    Args:
        ws_url: Optional WebSocket URL to use directly

    Returns:
        Ethereum WebSocket URL

    Raises:
        ValueError: If WebSocket URL is not provided and ETH_WS_URL env var is not set
    """
    if ws_url:
        return ws_url

    env_ws_url = os.getenv("ETH_WS_URL")
    if not env_ws_url:
        msg = "ETH_WS_URL must be provided or set in environment variables"
        raise ValueError(msg)

    return env_ws_url


def get_jsonrpc_transport(transport: str | None = None) -> str:
    """Get the wire transport name ("http" or "websocket").

    Reads ETH_JSONRPC_TRANSPORT when no explicit value is given and defaults
    to "http".

    Raises:
        ValueError: If the name is not a supported transport
    """
    name = (transport or os.getenv("ETH_JSONRPC_TRANSPORT") or "http").lower()
    if name not in SUPPORTED_TRANSPORTS:
        msg = f"Unsupported JSON-RPC transport: {name}"
        raise ValueError(msg)
    return name


def get_jsonrpc_variant(variant: str | None = None) -> str:
    """Get the node variant name ("parity" or "geth").

    Reads ETH_JSONRPC_VARIANT when no explicit value is given and defaults
    to "parity".

    Raises:
        ValueError: If the name is not a supported variant
    """
    name = (variant or os.getenv("ETH_JSONRPC_VARIANT") or "parity").lower()
    if name not in SUPPORTED_VARIANTS:
        msg = f"Unsupported JSON-RPC variant: {name}"
        raise ValueError(msg)
    return name


__all__ = [
    "SUPPORTED_TRANSPORTS",
    "SUPPORTED_VARIANTS",
    "get_eth_rpc_url",
    "get_eth_ws_url",
    "get_jsonrpc_transport",
    "get_jsonrpc_variant",
    "get_optional_env",
]
