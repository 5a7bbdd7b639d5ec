"""Request shapers for each logical JSON-RPC operation.

Every function here is pure: it validates its options and returns a
``JsonRpcRequest`` without touching the network, so malformed selectors fail
before anything is sent.
"""

from typing import Any, Literal

from pydantic import ValidationError

from src.ethereum_jsonrpc.errors import ConfigurationError
from src.ethereum_jsonrpc.quantity import integer_to_quantity, is_block_tag
from src.ethereum_jsonrpc.rpc_models import JsonRpcRequest, RequestId


type TransactionDetail = Literal["full", "hashes"]


def request(*, id: RequestId, method: str, params: list[Any]) -> JsonRpcRequest:  # noqa: A002
    """Build a JSON-RPC request carrying the protocol version marker.

    Raises:
        ConfigurationError: If method is empty or params is not a list
    """
    if not isinstance(params, list):
        msg = f"params must be a list, got {type(params).__name__}"
        raise ConfigurationError(msg)
    try:
        return JsonRpcRequest(id=id, method=method, params=params)
    except ValidationError as e:
        msg = f"Invalid JSON-RPC request for method {method!r}: {e}"
        raise ConfigurationError(msg) from e


def _include_transactions(transactions: TransactionDetail) -> bool:
    match transactions:
        case "full":
            return True
        case "hashes":
            return False
    msg = f"transactions must be 'full' or 'hashes', got {transactions!r}"
    raise ConfigurationError(msg)


def get_balance_request(
    *, id: RequestId, hash_data: str, block_quantity: str  # noqa: A002
) -> JsonRpcRequest:
    """Build an eth_getBalance request for an address at a block."""
    return request(id=id, method="eth_getBalance", params=[hash_data, block_quantity])


def get_block_by_hash_request(
    *,
    id: RequestId,  # noqa: A002
    hash: str,  # noqa: A002
    transactions: TransactionDetail = "full",
) -> JsonRpcRequest:
    """Build an eth_getBlockByHash request."""
    return request(
        id=id,
        method="eth_getBlockByHash",
        params=[hash, _include_transactions(transactions)],
    )


def get_block_by_number_request(
    *,
    id: RequestId,  # noqa: A002
    quantity: int | None = None,
    tag: str | None = None,
    transactions: TransactionDetail = "full",
) -> JsonRpcRequest:
    """Build an eth_getBlockByNumber request.

    Exactly one of ``quantity`` and ``tag`` selects the block.

    Args:
        id: Request id
        quantity: Block number
        tag: One of "earliest", "latest", "pending"
        transactions: "full" for transaction bodies, "hashes" for hashes only

    Raises:
        ConfigurationError: If both or neither selector is given, or the tag
            is not a known block tag
    """
    if quantity is not None and tag is not None:
        msg = "Only one of quantity or tag can be passed to get_block_by_number_request"
        raise ConfigurationError(msg)
    if quantity is None and tag is None:
        msg = "One of quantity or tag MUST be passed to get_block_by_number_request"
        raise ConfigurationError(msg)

    if quantity is not None:
        try:
            subject = integer_to_quantity(quantity)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
    elif is_block_tag(tag):
        subject = tag
    else:
        msg = f"Unknown block tag: {tag!r}"
        raise ConfigurationError(msg)

    return request(
        id=id,
        method="eth_getBlockByNumber",
        params=[subject, _include_transactions(transactions)],
    )


def get_block_by_tag_request(tag: str) -> JsonRpcRequest:
    """Build the singleton request used to resolve a tag to a block number.

    Only transaction hashes are requested since just the header is needed.
    """
    return get_block_by_number_request(id=0, tag=tag, transactions="hashes")


def eth_call_request(
    *,
    id: RequestId,  # noqa: A002
    contract_address: str,
    data: str,
    block: str | None = None,
) -> JsonRpcRequest:
    """Build an eth_call request executing ``data`` against a contract.

    The block selector is only sent when given; nodes default to "latest".
    """
    params: list[Any] = [{"to": contract_address, "data": data}]
    if block is not None:
        params.append(block)
    return request(id=id, method="eth_call", params=params)


def get_transaction_receipt_request(
    *, id: RequestId, hash: str  # noqa: A002
) -> JsonRpcRequest:
    """Build an eth_getTransactionReceipt request."""
    return request(id=id, method="eth_getTransactionReceipt", params=[hash])


__all__ = [
    "TransactionDetail",
    "eth_call_request",
    "get_balance_request",
    "get_block_by_hash_request",
    "get_block_by_number_request",
    "get_block_by_tag_request",
    "get_transaction_receipt_request",
    "request",
]
