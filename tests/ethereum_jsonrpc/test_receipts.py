"""Tests for receipt fetching and log extraction."""

from collections.abc import Callable

import pytest

from typing import Any

from src.ethereum_jsonrpc import receipts
from src.ethereum_jsonrpc.errors import BatchError, ConfigurationError
from src.ethereum_jsonrpc.models import TransactionParams
from src.ethereum_jsonrpc.receipts import to_log_params, to_receipt_params


TX_HASH = "0x" + "b1" * 32


@pytest.fixture
def receipt() -> dict[str, Any]:
    """A successful receipt with one two-topic log."""
    return {
        "transactionHash": TX_HASH,
        "transactionIndex": "0x3",
        "blockHash": "0x" + "a1" * 32,
        "blockNumber": "0x64",
        "cumulativeGasUsed": "0x10000",
        "gasUsed": "0x5208",
        "contractAddress": None,
        "status": "0x1",
        "logs": [
            {
                "address": "0x" + "33" * 20,
                "data": "0x" + "00" * 32,
                "logIndex": "0x2",
                "transactionHash": TX_HASH,
                "blockHash": "0x" + "a1" * 32,
                "blockNumber": "0x64",
                "topics": ["0xddf252ad", "0x" + "22" * 32],
            }
        ],
    }


class TestToReceiptParams:
    """Tests for to_receipt_params."""

    def test_decodes_receipt(self, receipt: dict[str, Any]) -> None:
        """Test quantities are decoded and gas carried over."""
        params = to_receipt_params(receipt, gas=50000)

        assert params.transaction_index == 3
        assert params.block_number == 100
        assert params.cumulative_gas_used == 65536
        assert params.gas_used == 21000
        assert params.gas == 50000
        assert params.status == "ok"

    @pytest.mark.parametrize(
        ("status", "expected"), [("0x1", "ok"), ("0x0", "error"), (None, None)]
    )
    def test_status(self, receipt: dict[str, Any], status: str | None, expected: str | None) -> None:
        """Test status codes, and pre-Byzantium receipts without one."""
        receipt["status"] = status

        assert to_receipt_params(receipt, gas=1).status == expected


class TestToLogParams:
    """Tests for to_log_params."""

    def test_spreads_topics(self, receipt: dict[str, Any]) -> None:
        """Test topics fill the first fields and the rest stay empty."""
        log = to_log_params(receipt["logs"][0])

        assert log.index == 2
        assert log.first_topic == "0xddf252ad"
        assert log.second_topic == "0x" + "22" * 32
        assert log.third_topic is None
        assert log.fourth_topic is None


class TestFetch:
    """Tests for receipts.fetch."""

    @pytest.mark.asyncio
    async def test_accepts_transaction_params(
        self,
        make_transport: Callable[..., Any],
        make_batch_handler: Callable[..., Any],
        make_arguments: Callable[..., Any],
        receipt: dict[str, Any],
    ) -> None:
        """Test TransactionParams can be passed straight through."""
        transaction = TransactionParams(
            hash=TX_HASH, from_address_hash="0x" + "22" * 20, value=0, gas=90000, nonce=1, input="0x"
        )
        transport = make_transport(make_batch_handler(lambda item: {"result": receipt}))

        fetched = await receipts.fetch([transaction], make_arguments(transport))

        [params] = fetched.receipts
        assert params.gas == 90000
        assert len(fetched.logs) == 1
        payload, _ = transport.calls[0]
        assert payload[0]["method"] == "eth_getTransactionReceipt"
        assert payload[0]["params"] == [TX_HASH]

    @pytest.mark.asyncio
    async def test_missing_receipt_raises(
        self,
        make_transport: Callable[..., Any],
        make_batch_handler: Callable[..., Any],
        make_arguments: Callable[..., Any],
    ) -> None:
        """Test a null receipt fails the batch with the transaction annotated."""
        transport = make_transport(make_batch_handler(lambda item: {"result": None}))

        with pytest.raises(BatchError) as exc_info:
            await receipts.fetch([{"hash": TX_HASH, "gas": 21000}], make_arguments(transport))

        [error] = exc_info.value.errors
        assert error.message == receipts.RECEIPT_NOT_FOUND_MESSAGE
        assert error.data == {"gas": 21000, "hash": TX_HASH}

    @pytest.mark.asyncio
    async def test_node_error_is_annotated(
        self,
        make_transport: Callable[..., Any],
        make_batch_handler: Callable[..., Any],
        make_arguments: Callable[..., Any],
    ) -> None:
        """Test node errors carry the transaction's hash and gas."""
        transport = make_transport(
            make_batch_handler(lambda item: {"error": {"code": -32000, "message": "pruned"}})
        )

        with pytest.raises(BatchError) as exc_info:
            await receipts.fetch([{"hash": TX_HASH, "gas": 5}], make_arguments(transport))

        assert exc_info.value.errors[0].data == {"gas": 5, "hash": TX_HASH}

    @pytest.mark.asyncio
    async def test_empty_input_skips_transport(
        self, make_transport: Callable[..., Any], make_arguments: Callable[..., Any]
    ) -> None:
        """Test nothing is sent for no transactions."""
        transport = make_transport(lambda payload: [])

        fetched = await receipts.fetch([], make_arguments(transport))

        assert fetched.receipts == []
        assert not transport.called

    @pytest.mark.asyncio
    async def test_missing_gas_fails_before_network(
        self, make_transport: Callable[..., Any], make_arguments: Callable[..., Any]
    ) -> None:
        """Test params without gas are a configuration error."""
        transport = make_transport(lambda payload: [])

        with pytest.raises(ConfigurationError, match="ReceiptRequestParams"):
            await receipts.fetch([{"hash": TX_HASH}], make_arguments(transport))

        assert not transport.called
