"""Parity/OpenEthereum variant: trace_* and parity_* methods."""

from collections.abc import Mapping, Sequence

from typing import Any

from src.ethereum_jsonrpc.config import JsonRpcNamedArguments
from src.ethereum_jsonrpc.correlation import correlate, id_to_params
from src.ethereum_jsonrpc.dispatch import json_rpc
from src.ethereum_jsonrpc.models import (
    InternalTransactionParams,
    InternalTransactionRequestParams,
    TransactionParams,
    validate_params,
)
from src.ethereum_jsonrpc.quantity import optional_quantity_to_integer, quantity_to_integer
from src.ethereum_jsonrpc.requests import request
from src.ethereum_jsonrpc.transactions import to_transactions_params
from src.helpers.logging import get_logger


logger = get_logger(__name__)


def _annotate(params: InternalTransactionRequestParams) -> dict[str, Any]:
    return {"blockNumber": params.block_number, "transactionHash": params.transaction_hash}


def trace_to_internal_transaction_params(
    trace: dict[str, Any],
    index: int,
    params: InternalTransactionRequestParams,
) -> InternalTransactionParams:
    """Decode one entry of a ``trace_replayTransaction`` trace list."""
    action = trace["action"]
    result = trace.get("result") or {}
    trace_type = trace["type"]

    fields: dict[str, Any] = {
        "transaction_hash": params.transaction_hash,
        "block_number": params.block_number,
        "index": index,
        "trace_address": trace.get("traceAddress", []),
        "type": trace_type,
        "error": trace.get("error"),
    }

    match trace_type:
        case "call":
            fields |= {
                "call_type": action.get("callType"),
                "from_address_hash": action["from"],
                "to_address_hash": action.get("to"),
                "value": quantity_to_integer(action.get("value", "0x0")),
                "gas": quantity_to_integer(action["gas"]),
                "gas_used": optional_quantity_to_integer(result.get("gasUsed")),
                "input": action.get("input"),
                "output": result.get("output"),
            }
        case "create":
            fields |= {
                "from_address_hash": action["from"],
                "created_contract_address_hash": result.get("address"),
                "value": quantity_to_integer(action.get("value", "0x0")),
                "gas": quantity_to_integer(action["gas"]),
                "gas_used": optional_quantity_to_integer(result.get("gasUsed")),
                "input": action.get("init"),
                "output": result.get("code"),
            }
        case "suicide":
            fields |= {
                "from_address_hash": action["address"],
                "to_address_hash": action["refundAddress"],
                "value": quantity_to_integer(action["balance"]),
            }
        case "reward":
            fields |= {
                "to_address_hash": action["author"],
                "value": quantity_to_integer(action["value"]),
            }
        case _:
            msg = f"Unknown trace type: {trace_type!r}"
            raise ValueError(msg)

    return InternalTransactionParams(**fields)


class ParityVariant:
    """Tracing and mempool access for Parity-compatible nodes."""

    async def fetch_internal_transactions(
        self,
        params_list: Sequence[InternalTransactionRequestParams | Mapping[str, Any] | Any],
        named_arguments: JsonRpcNamedArguments | Mapping[str, Any],
    ) -> list[InternalTransactionParams]:
        """Replay each transaction with the "trace" tracer in one batch.

        Raises:
            ConfigurationError: If an item has no transaction hash
            BatchError: If any transaction could not be traced
        """
        validated = validate_params(InternalTransactionRequestParams, params_list)
        if not validated:
            return []

        requests_by_id = id_to_params(validated)
        responses = await json_rpc(
            [
                request(
                    id=request_id,
                    method="trace_replayTransaction",
                    params=[params.transaction_hash, ["trace"]],
                )
                for request_id, params in requests_by_id.items()
            ],
            named_arguments,
        )
        pairs = correlate(responses, requests_by_id, annotate=_annotate).unwrap()

        internal_transactions = [
            trace_to_internal_transaction_params(trace, index, params)
            for params, result in pairs
            for index, trace in enumerate((result or {}).get("trace", []))
        ]
        logger.debug(
            "Traced %d transactions into %d internal transactions",
            len(validated),
            len(internal_transactions),
        )
        return internal_transactions

    async def fetch_pending_transactions(
        self, named_arguments: JsonRpcNamedArguments | Mapping[str, Any]
    ) -> list[TransactionParams]:
        """Fetch the node's pending transactions via parity_pendingTransactions."""
        transactions = await json_rpc(
            request(id=1, method="parity_pendingTransactions", params=[]),
            named_arguments,
        )
        return to_transactions_params(transactions or [])


__all__ = ["ParityVariant", "trace_to_internal_transaction_params"]
