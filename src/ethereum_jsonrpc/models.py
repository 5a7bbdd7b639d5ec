"""Pydantic models for the parameters consumed and produced by the client."""

# Pydantic needs this at runtime to validate the datetime fields
from datetime import datetime
from collections.abc import Iterable
from enum import StrEnum

from typing import Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from src.ethereum_jsonrpc.errors import ConfigurationError
from src.ethereum_jsonrpc.quantity import integer_to_quantity


class NextState(StrEnum):
    """Whether a block range fetch may continue past its last block."""

    MORE = "more"
    END_OF_CHAIN = "end_of_chain"


class BalanceParams(BaseModel):
    """Input for one eth_getBalance lookup."""

    hash_data: str = Field(..., description="Address hash")
    block_quantity: str = Field(
        ..., pattern=r"^0x[0-9a-fA-F]+$", description="Block number as hex quantity"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("block_quantity", mode="before")
    @classmethod
    def encode_block_number(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return integer_to_quantity(value)
        return value


class AddressBalance(BaseModel):
    """Balance of an address at a block, in wei."""

    address_hash: str
    block_number: int
    value: int


class TransactionParams(BaseModel):
    """Normalized transaction, mined or pending."""

    hash: str
    block_hash: str | None = None
    block_number: int | None = None
    index: int | None = None
    from_address_hash: str
    to_address_hash: str | None = None
    value: int
    gas: int
    gas_price: int | None = None
    max_fee_per_gas: int | None = None
    max_priority_fee_per_gas: int | None = None
    nonce: int
    input: str
    type: int | None = None
    v: int | None = None
    r: int | None = None
    s: int | None = None


class BlockParams(BaseModel):
    """Normalized block header."""

    number: int
    hash: str
    parent_hash: str
    nonce: int | None = None
    miner_hash: str
    difficulty: int | None = None
    total_difficulty: int | None = None
    size: int | None = None
    gas_limit: int
    gas_used: int
    base_fee_per_gas: int | None = None
    extra_data: str | None = None
    timestamp: datetime
    transaction_count: int


class FetchedBlocks(BaseModel):
    """Blocks and hoisted transactions returned by a block fetch."""

    next: NextState = NextState.MORE
    blocks: list[BlockParams] = Field(default_factory=list)
    transactions: list[TransactionParams] = Field(default_factory=list)


class ReceiptRequestParams(BaseModel):
    """Input for one eth_getTransactionReceipt lookup."""

    hash: str
    gas: int

    model_config = ConfigDict(frozen=True, extra="ignore")


class ReceiptParams(BaseModel):
    """Normalized transaction receipt."""

    transaction_hash: str
    transaction_index: int
    block_hash: str | None = None
    block_number: int | None = None
    cumulative_gas_used: int
    gas_used: int
    gas: int
    contract_address_hash: str | None = None
    status: Literal["ok", "error"] | None = None


class LogParams(BaseModel):
    """Log entry extracted from a receipt."""

    address_hash: str
    data: str
    index: int
    transaction_hash: str
    block_hash: str | None = None
    block_number: int | None = None
    first_topic: str | None = None
    second_topic: str | None = None
    third_topic: str | None = None
    fourth_topic: str | None = None


class ReceiptsAndLogs(BaseModel):
    """Receipts and their logs as separate flat lists."""

    receipts: list[ReceiptParams] = Field(default_factory=list)
    logs: list[LogParams] = Field(default_factory=list)


class InternalTransactionParams(BaseModel):
    """One call frame inside a transaction's execution trace."""

    transaction_hash: str
    block_number: int | None = None
    index: int
    trace_address: list[int] = Field(default_factory=list)
    type: Literal["call", "create", "suicide", "reward"]
    call_type: str | None = None
    from_address_hash: str | None = None
    to_address_hash: str | None = None
    created_contract_address_hash: str | None = None
    value: int = 0
    gas: int | None = None
    gas_used: int | None = None
    input: str | None = None
    output: str | None = None
    error: str | None = None


class InternalTransactionRequestParams(BaseModel):
    """Input for tracing one transaction; accepts a transaction's ``hash``."""

    transaction_hash: str = Field(
        ..., validation_alias=AliasChoices("transaction_hash", "hash")
    )
    block_number: int | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class ContractFunction(BaseModel):
    """One eth_call to execute; ``id`` is echoed back in the response."""

    contract_address: str
    data: str
    id: int | str

    model_config = ConfigDict(frozen=True)


def validate_params[M: BaseModel](model: type[M], items: Iterable[Any]) -> list[M]:
    """Validate caller params, reading mappings or model attributes.

    Raises:
        ConfigurationError: If any item does not fit ``model``
    """
    try:
        return [model.model_validate(item, from_attributes=True) for item in items]
    except ValidationError as e:
        msg = f"Invalid {model.__name__}: {e}"
        raise ConfigurationError(msg) from e


__all__ = [
    "AddressBalance",
    "BalanceParams",
    "BlockParams",
    "ContractFunction",
    "FetchedBlocks",
    "InternalTransactionParams",
    "InternalTransactionRequestParams",
    "LogParams",
    "NextState",
    "ReceiptParams",
    "ReceiptRequestParams",
    "ReceiptsAndLogs",
    "TransactionParams",
    "validate_params",
]
