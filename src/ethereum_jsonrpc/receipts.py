"""Fetch transaction receipts and extract their logs."""

from collections.abc import Mapping, Sequence

from typing import Any

from src.ethereum_jsonrpc.config import JsonRpcNamedArguments
from src.ethereum_jsonrpc.correlation import correlate, id_to_params
from src.ethereum_jsonrpc.dispatch import json_rpc
from src.ethereum_jsonrpc.errors import BatchError
from src.ethereum_jsonrpc.models import (
    LogParams,
    ReceiptParams,
    ReceiptRequestParams,
    ReceiptsAndLogs,
    validate_params,
)
from src.ethereum_jsonrpc.quantity import optional_quantity_to_integer, quantity_to_integer
from src.ethereum_jsonrpc.requests import get_transaction_receipt_request
from src.ethereum_jsonrpc.rpc_models import JsonRpcError
from src.helpers.logging import get_logger


logger = get_logger(__name__)

RECEIPT_NOT_FOUND_MESSAGE = "Transaction receipt not found"

TOPIC_FIELDS = ("first_topic", "second_topic", "third_topic", "fourth_topic")


def _annotate(params: ReceiptRequestParams) -> dict[str, Any]:
    return {"gas": params.gas, "hash": params.hash}


def _status(receipt: dict[str, Any]) -> str | None:
    match receipt.get("status"):
        case "0x1":
            return "ok"
        case "0x0":
            return "error"
        case _:
            # Receipts before Byzantium carry a state root instead
            return None


def to_receipt_params(receipt: dict[str, Any], gas: int) -> ReceiptParams:
    """Decode one receipt; ``gas`` is the transaction's gas limit."""
    return ReceiptParams(
        transaction_hash=receipt["transactionHash"],
        transaction_index=quantity_to_integer(receipt["transactionIndex"]),
        block_hash=receipt.get("blockHash"),
        block_number=optional_quantity_to_integer(receipt.get("blockNumber")),
        cumulative_gas_used=quantity_to_integer(receipt["cumulativeGasUsed"]),
        gas_used=quantity_to_integer(receipt["gasUsed"]),
        gas=gas,
        contract_address_hash=receipt.get("contractAddress"),
        status=_status(receipt),
    )


def to_log_params(log: dict[str, Any]) -> LogParams:
    """Decode one log entry, spreading up to four topics into fields."""
    topics = dict(zip(TOPIC_FIELDS, log.get("topics", []), strict=False))
    return LogParams(
        address_hash=log["address"],
        data=log["data"],
        index=quantity_to_integer(log["logIndex"]),
        transaction_hash=log["transactionHash"],
        block_hash=log.get("blockHash"),
        block_number=optional_quantity_to_integer(log.get("blockNumber")),
        **topics,
    )


async def fetch(
    transactions_params: Sequence[ReceiptRequestParams | Mapping[str, Any] | Any],
    named_arguments: JsonRpcNamedArguments | Mapping[str, Any],
) -> ReceiptsAndLogs:
    """Fetch the receipt of every transaction in one batch.

    Args:
        transactions_params: Items with at least ``hash`` and ``gas``, such
            as ``TransactionParams`` or plain mappings
        named_arguments: Transport, transport options and variant

    Returns:
        ReceiptsAndLogs with receipts and logs as separate flat lists

    Raises:
        ConfigurationError: If an item lacks ``hash`` or ``gas``
        BatchError: If any receipt errored or does not exist yet
    """
    params_list = validate_params(ReceiptRequestParams, transactions_params)
    if not params_list:
        return ReceiptsAndLogs()

    requests_by_id = id_to_params(params_list)
    responses = await json_rpc(
        [
            get_transaction_receipt_request(id=request_id, hash=params.hash)
            for request_id, params in requests_by_id.items()
        ],
        named_arguments,
    )
    pairs = correlate(responses, requests_by_id, annotate=_annotate).unwrap()

    missing = [
        JsonRpcError(message=RECEIPT_NOT_FOUND_MESSAGE, data=_annotate(params))
        for params, receipt in pairs
        if receipt is None
    ]
    if missing:
        logger.warning("%d transaction receipt(s) not found", len(missing))
        raise BatchError(missing)

    receipts = [to_receipt_params(receipt, params.gas) for params, receipt in pairs]
    logs = [to_log_params(log) for _, receipt in pairs for log in receipt.get("logs", [])]

    logger.debug("Fetched %d receipts with %d logs", len(receipts), len(logs))
    return ReceiptsAndLogs(receipts=receipts, logs=logs)


__all__ = [
    "RECEIPT_NOT_FOUND_MESSAGE",
    "fetch",
    "to_log_params",
    "to_receipt_params",
]
