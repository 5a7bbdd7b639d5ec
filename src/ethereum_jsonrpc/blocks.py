"""Normalize wire blocks and reduce block batch responses."""

from typing import Any

from src.ethereum_jsonrpc.correlation import (
    NO_RESPONSE_MESSAGE,
    default_annotation,
    order_responses,
)
from src.ethereum_jsonrpc.errors import BatchError
from src.ethereum_jsonrpc.models import (
    BlockParams,
    FetchedBlocks,
    NextState,
    TransactionParams,
)
from src.ethereum_jsonrpc.quantity import (
    nonce_to_integer,
    optional_quantity_to_integer,
    quantity_to_integer,
    timestamp_to_datetime,
)
from src.ethereum_jsonrpc.rpc_models import JsonRpcError, JsonRpcResponse
from src.ethereum_jsonrpc.transactions import to_transaction_params
from src.helpers.logging import get_logger


logger = get_logger(__name__)


def to_block_params(block: dict[str, Any]) -> BlockParams:
    """Decode a block header; embedded transactions are only counted."""
    nonce = block.get("nonce")
    return BlockParams(
        number=quantity_to_integer(block["number"]),
        hash=block["hash"],
        parent_hash=block["parentHash"],
        nonce=nonce_to_integer(nonce) if nonce is not None else None,
        miner_hash=block["miner"],
        difficulty=optional_quantity_to_integer(block.get("difficulty")),
        total_difficulty=optional_quantity_to_integer(block.get("totalDifficulty")),
        size=optional_quantity_to_integer(block.get("size")),
        gas_limit=quantity_to_integer(block["gasLimit"]),
        gas_used=quantity_to_integer(block["gasUsed"]),
        base_fee_per_gas=optional_quantity_to_integer(block.get("baseFeePerGas")),
        extra_data=block.get("extraData"),
        timestamp=timestamp_to_datetime(block["timestamp"]),
        transaction_count=len(block.get("transactions", [])),
    )


def to_transactions_params(block: dict[str, Any]) -> list[TransactionParams]:
    """Hoist the full transactions embedded in a block.

    Each transaction keeps its parent's hash and number even when the node
    leaves them out of the embedded object.
    """
    transactions: list[TransactionParams] = []
    for transaction in block.get("transactions", []):
        if not isinstance(transaction, dict):
            # Hash-only block bodies carry no transaction data
            continue
        linked = {
            "blockHash": block["hash"],
            "blockNumber": block["number"],
            **{key: value for key, value in transaction.items() if value is not None},
        }
        if "to" not in transaction:
            linked["to"] = None
        transactions.append(to_transaction_params(linked))
    return transactions


def handle_get_blocks(
    responses: list[JsonRpcResponse],
    id_to_params: dict[int, Any],
) -> FetchedBlocks:
    """Reduce a block batch, in request order, into blocks and transactions.

    A null result means the block does not exist yet: processing stops there
    with ``NextState.END_OF_CHAIN`` and whatever came after it is ignored.

    Raises:
        BatchError: If the node returned errors before the end of the chain
        UnexpectedResponseIdError: If a response id was never requested
    """
    raw_blocks: list[dict[str, Any]] = []
    errors: list[JsonRpcError] = []
    next_state = NextState.MORE

    for _, params, response in order_responses(responses, id_to_params):
        if response is None:
            errors.append(
                JsonRpcError(message=NO_RESPONSE_MESSAGE, data=default_annotation(params))
            )
        elif response.error is not None:
            errors.append(
                response.error.model_copy(update={"data": default_annotation(params)})
            )
        elif response.result is None:
            next_state = NextState.END_OF_CHAIN
            logger.debug("Reached end of chain at %s", params)
            break
        else:
            raw_blocks.append(response.result)

    if errors:
        raise BatchError(errors)

    blocks = [to_block_params(block) for block in raw_blocks]
    transactions = [
        transaction for block in raw_blocks for transaction in to_transactions_params(block)
    ]
    return FetchedBlocks(next=next_state, blocks=blocks, transactions=transactions)


__all__ = ["handle_get_blocks", "to_block_params", "to_transactions_params"]
