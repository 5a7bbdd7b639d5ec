"""Node variant capability for methods outside the core JSON-RPC API."""

from collections.abc import Sequence

from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from src.ethereum_jsonrpc.config import JsonRpcNamedArguments
    from src.ethereum_jsonrpc.models import (
        InternalTransactionParams,
        InternalTransactionRequestParams,
        TransactionParams,
    )


@runtime_checkable
class Variant(Protocol):
    """Node-specific extensions such as tracing and mempool access."""

    async def fetch_internal_transactions(
        self,
        params_list: "Sequence[InternalTransactionRequestParams]",
        named_arguments: "JsonRpcNamedArguments",
    ) -> "list[InternalTransactionParams]":
        """Trace each transaction and flatten its internal calls."""
        ...

    async def fetch_pending_transactions(
        self, named_arguments: "JsonRpcNamedArguments"
    ) -> "list[TransactionParams]":
        """Fetch transactions waiting in the node's pool."""
        ...


__all__ = ["Variant"]
