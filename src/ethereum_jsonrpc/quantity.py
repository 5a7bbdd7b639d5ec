"""Conversions between wire hex quantities and native values."""

import re
from datetime import UTC, datetime

from typing import Any

from src.ethereum_jsonrpc.errors import InvalidQuantityError
from src.helpers.constants import BLOCK_TAGS


QUANTITY_PATTERN = re.compile(r"0x[0-9a-fA-F]+")


def quantity_to_integer(quantity: str) -> int:
    """Parse a hex quantity string to a non-negative integer.

    Args:
        quantity: "0x"-prefixed hexadecimal string

    Returns:
        int: Decoded integer of arbitrary size

    Raises:
        InvalidQuantityError: If the prefix is missing or a digit is not hex

    Example:
        >>> quantity_to_integer("0x1b4")
        436
    """
    if not isinstance(quantity, str) or not QUANTITY_PATTERN.fullmatch(quantity):
        raise InvalidQuantityError(quantity)
    return int(quantity[2:], 16)


def integer_to_quantity(integer: int) -> str:
    """Encode a non-negative integer as a lowercase hex quantity.

    Example:
        >>> integer_to_quantity(436)
        '0x1b4'
        >>> integer_to_quantity(0)
        '0x0'
    """
    if isinstance(integer, bool) or not isinstance(integer, int) or integer < 0:
        msg = f"Quantity must be a non-negative integer, got {integer!r}"
        raise ValueError(msg)
    return hex(integer)


def nonce_to_integer(nonce: str) -> int:
    """Parse an 8-byte proof-of-work nonce to an integer."""
    return quantity_to_integer(nonce)


def timestamp_to_datetime(timestamp: str) -> datetime:
    """Parse a hex Unix timestamp to a UTC datetime.

    Example:
        >>> timestamp_to_datetime("0x5a4f5a1c")
        datetime.datetime(2018, 1, 5, 10, 57, 32, tzinfo=datetime.timezone.utc)
    """
    return datetime.fromtimestamp(quantity_to_integer(timestamp), tz=UTC)


def optional_quantity_to_integer(quantity: str | None) -> int | None:
    """Parse a quantity that the node may omit or send as null."""
    if quantity is None:
        return None
    return quantity_to_integer(quantity)


def is_block_tag(value: Any) -> bool:
    """Check whether value is one of the logical block tags."""
    return isinstance(value, str) and value in BLOCK_TAGS


__all__ = [
    "QUANTITY_PATTERN",
    "integer_to_quantity",
    "is_block_tag",
    "nonce_to_integer",
    "optional_quantity_to_integer",
    "quantity_to_integer",
    "timestamp_to_datetime",
]
