"""Ethereum JSON-RPC client operations.

Each operation takes its logical params plus named arguments selecting the
transport, its options and the node variant, and performs at most one round
trip. Named arguments and request selectors are validated before anything is
sent.

Example:
    ```python
    from src.ethereum_jsonrpc.client import fetch_blocks_by_range
    from src.ethereum_jsonrpc.config import JsonRpcNamedArguments
    from src.ethereum_jsonrpc.http import HTTPTransport
    from src.ethereum_jsonrpc.parity import ParityVariant

    async with HTTPTransport("http://localhost:8545") as transport:
        arguments = JsonRpcNamedArguments(
            transport=transport, transport_options={}, variant=ParityVariant()
        )
        fetched = await fetch_blocks_by_range(range(100, 110), arguments)
        if fetched.next is NextState.END_OF_CHAIN:
            ...
    ```
"""

from collections.abc import Iterable, Mapping, Sequence

from typing import Any

from src.ethereum_jsonrpc import receipts
from src.ethereum_jsonrpc.blocks import handle_get_blocks
from src.ethereum_jsonrpc.config import JsonRpcNamedArguments, ensure_named_arguments
from src.ethereum_jsonrpc.correlation import correlate, id_to_params
from src.ethereum_jsonrpc.dispatch import json_rpc
from src.ethereum_jsonrpc.errors import InvalidTagError, NodeError
from src.ethereum_jsonrpc.models import (
    AddressBalance,
    BalanceParams,
    ContractFunction,
    FetchedBlocks,
    InternalTransactionParams,
    ReceiptsAndLogs,
    TransactionParams,
    validate_params,
)
from src.ethereum_jsonrpc.quantity import quantity_to_integer
from src.ethereum_jsonrpc.requests import (
    eth_call_request,
    get_balance_request,
    get_block_by_hash_request,
    get_block_by_number_request,
    get_block_by_tag_request,
)
from src.ethereum_jsonrpc.rpc_models import JsonRpcError, JsonRpcResponse
from src.helpers.constants import INVALID_PARAMS_CODE
from src.helpers.logging import get_logger


logger = get_logger(__name__)

type NamedArguments = JsonRpcNamedArguments | Mapping[str, Any]


def _annotate_balance(params: BalanceParams) -> dict[str, str]:
    return {"blockNumber": params.block_quantity, "hash": params.hash_data}


async def execute_contract_functions(
    functions: Sequence[ContractFunction | Mapping[str, Any]],
    named_arguments: NamedArguments,
) -> list[JsonRpcResponse]:
    """Execute read-only contract functions with eth_call in one batch.

    Each function's ``id`` is sent as the request id, so callers can match
    responses to functions. Results are returned undecoded.

    Args:
        functions: Items with ``contract_address``, ``data`` and ``id``
        named_arguments: Transport, transport options and variant

    Returns:
        Raw batch responses as delivered by the transport
    """
    arguments = ensure_named_arguments(named_arguments)
    calls = validate_params(ContractFunction, functions)
    if not calls:
        return []

    return await json_rpc(
        [
            eth_call_request(id=call.id, contract_address=call.contract_address, data=call.data)
            for call in calls
        ],
        arguments,
    )


async def fetch_balances(
    params_list: Sequence[BalanceParams | Mapping[str, Any]],
    named_arguments: NamedArguments,
) -> list[AddressBalance]:
    """Fetch the balance of each address at its block.

    Args:
        params_list: Items with ``hash_data`` (address) and ``block_quantity``
        named_arguments: Transport, transport options and variant

    Returns:
        One AddressBalance per params, in request order

    Raises:
        BatchError: If any lookup failed; every error carries
            ``{"blockNumber", "hash"}`` of the failed lookup as ``data``

    Example:
        ```python
        balances = await fetch_balances(
            [{"hash_data": "0x8bf3...", "block_quantity": "0x1b4"}], arguments
        )
        # [AddressBalance(address_hash="0x8bf3...", block_number=436, value=...)]
        ```
    """
    arguments = ensure_named_arguments(named_arguments)
    requests_by_id = id_to_params(validate_params(BalanceParams, params_list))
    if not requests_by_id:
        return []

    responses = await json_rpc(
        [
            get_balance_request(
                id=request_id,
                hash_data=params.hash_data,
                block_quantity=params.block_quantity,
            )
            for request_id, params in requests_by_id.items()
        ],
        arguments,
    )
    pairs = correlate(responses, requests_by_id, annotate=_annotate_balance).unwrap()

    return [
        AddressBalance(
            address_hash=params.hash_data,
            block_number=quantity_to_integer(params.block_quantity),
            value=quantity_to_integer(balance),
        )
        for params, balance in pairs
    ]


async def fetch_blocks_by_hash(
    block_hashes: Iterable[str],
    named_arguments: NamedArguments,
) -> FetchedBlocks:
    """Fetch blocks, with full transactions, by block hash."""
    arguments = ensure_named_arguments(named_arguments)
    requests_by_id = id_to_params(block_hashes)
    batch = [
        get_block_by_hash_request(id=request_id, hash=block_hash, transactions="full")
        for request_id, block_hash in requests_by_id.items()
    ]
    if not batch:
        return FetchedBlocks()

    responses = await json_rpc(batch, arguments)
    return handle_get_blocks(responses, requests_by_id)


async def fetch_blocks_by_range(
    block_numbers: Iterable[int],
    named_arguments: NamedArguments,
) -> FetchedBlocks:
    """Fetch blocks, with full transactions, by number.

    Args:
        block_numbers: Block numbers in order, usually a ``range``
        named_arguments: Transport, transport options and variant

    Returns:
        FetchedBlocks whose ``next`` is ``NextState.END_OF_CHAIN`` when the
        node had no block for one of the numbers; blocks up to that point
        are still returned

    Raises:
        BatchError: If the node returned errors before the end of the chain
    """
    arguments = ensure_named_arguments(named_arguments)
    requests_by_id = id_to_params(block_numbers)
    batch = [
        get_block_by_number_request(id=request_id, quantity=number, transactions="full")
        for request_id, number in requests_by_id.items()
    ]
    if not batch:
        return FetchedBlocks()

    fetched = handle_get_blocks(await json_rpc(batch, arguments), requests_by_id)
    logger.debug(
        "Fetched %d blocks and %d transactions (%s)",
        len(fetched.blocks),
        len(fetched.transactions),
        fetched.next,
    )
    return fetched


async def fetch_block_number_by_tag(tag: str, named_arguments: NamedArguments) -> int:
    """Resolve "earliest", "latest" or "pending" to a block number.

    Raises:
        ConfigurationError: If tag is not a known block tag
        InvalidTagError: If the node rejects the tag (code -32602)
        NodeError: For any other node error, or when no block is returned
        TransportError: If the node could not be reached
    """
    block_request = get_block_by_tag_request(tag)
    arguments = ensure_named_arguments(named_arguments)

    try:
        block = await json_rpc(block_request, arguments)
    except NodeError as e:
        if e.code == INVALID_PARAMS_CODE:
            raise InvalidTagError(e.error) from e
        raise

    if not block:
        raise NodeError(JsonRpcError(message="Block not found", data={"tag": tag}))

    return quantity_to_integer(block["number"])


async def fetch_internal_transactions(
    params_list: Sequence[Any],
    named_arguments: NamedArguments,
) -> list[InternalTransactionParams]:
    """Fetch internal transactions through the configured variant."""
    arguments = ensure_named_arguments(named_arguments)
    return await arguments.variant.fetch_internal_transactions(params_list, arguments)


async def fetch_pending_transactions(
    named_arguments: NamedArguments,
) -> list[TransactionParams]:
    """Fetch pending transactions through the configured variant."""
    arguments = ensure_named_arguments(named_arguments)
    return await arguments.variant.fetch_pending_transactions(arguments)


async def fetch_transaction_receipts(
    transactions_params: Sequence[Any],
    named_arguments: NamedArguments,
) -> ReceiptsAndLogs:
    """Fetch receipts and their logs for transactions with ``hash`` and ``gas``."""
    arguments = ensure_named_arguments(named_arguments)
    return await receipts.fetch(transactions_params, arguments)


__all__ = [
    "execute_contract_functions",
    "fetch_balances",
    "fetch_block_number_by_tag",
    "fetch_blocks_by_hash",
    "fetch_blocks_by_range",
    "fetch_internal_transactions",
    "fetch_pending_transactions",
    "fetch_transaction_receipts",
    "json_rpc",
]
