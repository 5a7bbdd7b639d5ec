"""Normalize wire transactions into ``TransactionParams``."""

from typing import Any

from src.ethereum_jsonrpc.models import TransactionParams
from src.ethereum_jsonrpc.quantity import optional_quantity_to_integer, quantity_to_integer


def to_transaction_params(transaction: dict[str, Any]) -> TransactionParams:
    """Decode one transaction object.

    Block fields are ``None`` for pending transactions.

    Example:
        >>> to_transaction_params({
        ...     "hash": "0xa2e8...", "from": "0xb7cf...", "to": None,
        ...     "value": "0x0", "gas": "0x5208", "gasPrice": "0x1",
        ...     "nonce": "0x2", "input": "0x", "blockNumber": None,
        ... }).gas
        21000
    """
    return TransactionParams(
        hash=transaction["hash"],
        block_hash=transaction.get("blockHash"),
        block_number=optional_quantity_to_integer(transaction.get("blockNumber")),
        index=optional_quantity_to_integer(transaction.get("transactionIndex")),
        from_address_hash=transaction["from"],
        to_address_hash=transaction.get("to"),
        value=quantity_to_integer(transaction["value"]),
        gas=quantity_to_integer(transaction["gas"]),
        gas_price=optional_quantity_to_integer(transaction.get("gasPrice")),
        max_fee_per_gas=optional_quantity_to_integer(transaction.get("maxFeePerGas")),
        max_priority_fee_per_gas=optional_quantity_to_integer(
            transaction.get("maxPriorityFeePerGas")
        ),
        nonce=quantity_to_integer(transaction["nonce"]),
        input=transaction.get("input", "0x"),
        type=optional_quantity_to_integer(transaction.get("type")),
        v=optional_quantity_to_integer(transaction.get("v")),
        r=optional_quantity_to_integer(transaction.get("r")),
        s=optional_quantity_to_integer(transaction.get("s")),
    )


def to_transactions_params(transactions: list[dict[str, Any]]) -> list[TransactionParams]:
    return [to_transaction_params(transaction) for transaction in transactions]


__all__ = ["to_transaction_params", "to_transactions_params"]
