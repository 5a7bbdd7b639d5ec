"""Geth variant: debug_traceTransaction and txpool_content."""

from collections.abc import Iterator, Mapping, Sequence

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
from src.ethereum_jsonrpc.quantity import optional_quantity_to_integer
from src.ethereum_jsonrpc.requests import request
from src.ethereum_jsonrpc.transactions import to_transaction_params
from src.helpers.logging import get_logger


logger = get_logger(__name__)

CALL_TRACER = {"tracer": "callTracer"}

CALL_TYPES = frozenset({"CALL", "CALLCODE", "DELEGATECALL", "STATICCALL"})
CREATE_TYPES = frozenset({"CREATE", "CREATE2"})
SELFDESTRUCT_TYPES = frozenset({"SELFDESTRUCT", "SUICIDE"})


def _annotate(params: InternalTransactionRequestParams) -> dict[str, Any]:
    return {"blockNumber": params.block_number, "transactionHash": params.transaction_hash}


def walk_calls(
    frame: dict[str, Any], trace_address: tuple[int, ...] = ()
) -> Iterator[tuple[tuple[int, ...], dict[str, Any]]]:
    """Yield every call frame depth-first with its trace address."""
    yield trace_address, frame
    for position, child in enumerate(frame.get("calls", [])):
        yield from walk_calls(child, (*trace_address, position))


def frame_to_internal_transaction_params(
    frame: dict[str, Any],
    trace_address: tuple[int, ...],
    index: int,
    params: InternalTransactionRequestParams,
) -> InternalTransactionParams:
    """Decode one callTracer frame."""
    frame_type = frame["type"].upper()
    fields: dict[str, Any] = {
        "transaction_hash": params.transaction_hash,
        "block_number": params.block_number,
        "index": index,
        "trace_address": list(trace_address),
        "from_address_hash": frame.get("from"),
        "value": optional_quantity_to_integer(frame.get("value")) or 0,
        "gas": optional_quantity_to_integer(frame.get("gas")),
        "gas_used": optional_quantity_to_integer(frame.get("gasUsed")),
        "error": frame.get("error"),
    }

    if frame_type in CALL_TYPES:
        fields |= {
            "type": "call",
            "call_type": frame_type.lower(),
            "to_address_hash": frame.get("to"),
            "input": frame.get("input"),
            "output": frame.get("output"),
        }
    elif frame_type in CREATE_TYPES:
        fields |= {
            "type": "create",
            "created_contract_address_hash": frame.get("to"),
            "input": frame.get("input"),
            "output": frame.get("output"),
        }
    elif frame_type in SELFDESTRUCT_TYPES:
        fields |= {"type": "suicide", "to_address_hash": frame.get("to")}
    else:
        msg = f"Unknown call frame type: {frame_type!r}"
        raise ValueError(msg)

    return InternalTransactionParams(**fields)


class GethVariant:
    """Tracing and mempool access for Geth-compatible nodes."""

    async def fetch_internal_transactions(
        self,
        params_list: Sequence[InternalTransactionRequestParams | Mapping[str, Any] | Any],
        named_arguments: JsonRpcNamedArguments | Mapping[str, Any],
    ) -> list[InternalTransactionParams]:
        """Trace each transaction with the call tracer in one batch.

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
                    method="debug_traceTransaction",
                    params=[params.transaction_hash, CALL_TRACER],
                )
                for request_id, params in requests_by_id.items()
            ],
            named_arguments,
        )
        pairs = correlate(responses, requests_by_id, annotate=_annotate).unwrap()

        internal_transactions: list[InternalTransactionParams] = []
        for params, root in pairs:
            if not root:
                continue
            for index, (trace_address, frame) in enumerate(walk_calls(root)):
                internal_transactions.append(
                    frame_to_internal_transaction_params(frame, trace_address, index, params)
                )

        logger.debug(
            "Traced %d transactions into %d internal transactions",
            len(validated),
            len(internal_transactions),
        )
        return internal_transactions

    async def fetch_pending_transactions(
        self, named_arguments: JsonRpcNamedArguments | Mapping[str, Any]
    ) -> list[TransactionParams]:
        """Fetch executable transactions from the ``pending`` txpool section."""
        content = await json_rpc(
            request(id=1, method="txpool_content", params=[]),
            named_arguments,
        )
        pending = (content or {}).get("pending", {})
        return [
            to_transaction_params(transaction)
            for by_nonce in pending.values()
            for transaction in by_nonce.values()
        ]


__all__ = ["GethVariant", "frame_to_internal_transaction_params", "walk_calls"]
