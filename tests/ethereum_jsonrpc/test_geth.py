"""Tests for the Geth variant."""

from collections.abc import Callable

import pytest

from typing import Any

from src.ethereum_jsonrpc.errors import ConfigurationError
from src.ethereum_jsonrpc.geth import (
    CALL_TRACER,
    GethVariant,
    frame_to_internal_transaction_params,
    walk_calls,
)
from src.ethereum_jsonrpc.models import InternalTransactionRequestParams


TX_HASH = "0x" + "d1" * 32
SENDER = "0x" + "22" * 20
CONTRACT = "0x" + "33" * 20
TOKEN = "0x" + "55" * 20


@pytest.fixture
def call_frame() -> dict[str, Any]:
    """A callTracer result with a nested call and a create."""
    return {
        "type": "CALL",
        "from": SENDER,
        "to": CONTRACT,
        "value": "0x10",
        "gas": "0x10000",
        "gasUsed": "0x200",
        "input": "0xa9059cbb",
        "output": "0x",
        "calls": [
            {
                "type": "DELEGATECALL",
                "from": CONTRACT,
                "to": TOKEN,
                "gas": "0x8000",
                "gasUsed": "0x100",
                "input": "0x",
                "calls": [
                    {
                        "type": "CREATE2",
                        "from": TOKEN,
                        "to": "0x" + "66" * 20,
                        "value": "0x0",
                        "gas": "0x4000",
                        "gasUsed": "0x80",
                        "input": "0x6080",
                    }
                ],
            },
            {
                "type": "SELFDESTRUCT",
                "from": CONTRACT,
                "to": SENDER,
                "value": "0x5",
            },
        ],
    }


class TestWalkCalls:
    """Tests for walk_calls."""

    def test_depth_first_trace_addresses(self, call_frame: dict[str, Any]) -> None:
        """Test frames come out depth-first with their positions."""
        addresses = [(address, frame["type"]) for address, frame in walk_calls(call_frame)]

        assert addresses == [
            ((), "CALL"),
            ((0,), "DELEGATECALL"),
            ((0, 0), "CREATE2"),
            ((1,), "SELFDESTRUCT"),
        ]


class TestFrameToInternalTransactionParams:
    """Tests for decoding callTracer frames."""

    @pytest.fixture
    def params(self) -> InternalTransactionRequestParams:
        return InternalTransactionRequestParams(transaction_hash=TX_HASH, block_number=9)

    def test_call_types(
        self, call_frame: dict[str, Any], params: InternalTransactionRequestParams
    ) -> None:
        """Test call opcodes map to call with a lowercase call type."""
        delegate = call_frame["calls"][0]

        internal = frame_to_internal_transaction_params(delegate, (0,), 1, params)

        assert internal.type == "call"
        assert internal.call_type == "delegatecall"
        assert internal.to_address_hash == TOKEN
        assert internal.value == 0
        assert internal.trace_address == [0]

    def test_create(
        self, call_frame: dict[str, Any], params: InternalTransactionRequestParams
    ) -> None:
        """Test CREATE2 records the created address."""
        create = call_frame["calls"][0]["calls"][0]

        internal = frame_to_internal_transaction_params(create, (0, 0), 2, params)

        assert internal.type == "create"
        assert internal.created_contract_address_hash == "0x" + "66" * 20
        assert internal.to_address_hash is None

    def test_selfdestruct(
        self, call_frame: dict[str, Any], params: InternalTransactionRequestParams
    ) -> None:
        """Test SELFDESTRUCT maps to suicide."""
        internal = frame_to_internal_transaction_params(call_frame["calls"][1], (1,), 3, params)

        assert internal.type == "suicide"
        assert internal.value == 5

    def test_unknown_type_raises(self, params: InternalTransactionRequestParams) -> None:
        """Test unknown opcodes are rejected."""
        with pytest.raises(ValueError, match="Unknown call frame type"):
            frame_to_internal_transaction_params({"type": "JUMP"}, (), 0, params)


class TestGethVariant:
    """Tests for GethVariant fetches."""

    @pytest.mark.asyncio
    async def test_fetch_internal_transactions(
        self,
        make_transport: Callable[..., Any],
        make_batch_handler: Callable[..., Any],
        make_arguments: Callable[..., Any],
        call_frame: dict[str, Any],
    ) -> None:
        """Test the whole call tree is flattened and indexed."""
        transport = make_transport(make_batch_handler(lambda item: {"result": call_frame}))

        internal = await GethVariant().fetch_internal_transactions(
            [{"hash": TX_HASH, "block_number": 9}],
            make_arguments(transport, GethVariant()),
        )

        assert [i.index for i in internal] == [0, 1, 2, 3]
        assert [i.type for i in internal] == ["call", "call", "create", "suicide"]
        assert {i.transaction_hash for i in internal} == {TX_HASH}
        payload, _ = transport.calls[0]
        assert payload[0]["method"] == "debug_traceTransaction"
        assert payload[0]["params"] == [TX_HASH, CALL_TRACER]

    @pytest.mark.asyncio
    async def test_fetch_pending_transactions(
        self, make_transport: Callable[..., Any], make_arguments: Callable[..., Any]
    ) -> None:
        """Test only the pending section of the txpool is returned."""

        def transaction(nonce: str) -> dict[str, Any]:
            return {
                "hash": "0x" + nonce[2:].rjust(64, "0"),
                "from": SENDER,
                "to": CONTRACT,
                "value": "0x0",
                "gas": "0x5208",
                "gasPrice": "0x1",
                "nonce": nonce,
                "input": "0x",
                "blockHash": None,
                "blockNumber": None,
            }

        content = {
            "pending": {SENDER: {"1": transaction("0x1"), "2": transaction("0x2")}},
            "queued": {SENDER: {"9": transaction("0x9")}},
        }
        transport = make_transport(lambda payload: {"id": payload["id"], "result": content})

        pending = await GethVariant().fetch_pending_transactions(
            make_arguments(transport, GethVariant())
        )

        assert [t.nonce for t in pending] == [1, 2]
        payload, _ = transport.calls[0]
        assert payload["method"] == "txpool_content"

    @pytest.mark.asyncio
    async def test_missing_hash_fails_before_network(
        self, make_transport: Callable[..., Any], make_arguments: Callable[..., Any]
    ) -> None:
        """Test params without a transaction hash are a configuration error."""
        transport = make_transport(lambda payload: [])

        with pytest.raises(ConfigurationError, match="InternalTransactionRequestParams"):
            await GethVariant().fetch_internal_transactions(
                [{"block_number": 1}], make_arguments(transport, GethVariant())
            )

        assert not transport.called
