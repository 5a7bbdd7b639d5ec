"""Pytest configuration and shared fixtures for JSON-RPC client tests."""

from collections.abc import Callable

import pytest

from typing import Any

from src.ethereum_jsonrpc.config import JsonRpcNamedArguments
from src.ethereum_jsonrpc.parity import ParityVariant


type Handler = Callable[[Any], Any]


class StubTransport:
    """Transport that records every payload and answers via a handler.

    The handler receives the wire payload and returns the decoded reply, or
    an exception instance to raise.
    """

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.calls: list[tuple[Any, Any]] = []

    @property
    def called(self) -> bool:
        return bool(self.calls)

    async def send(self, payload: Any, options: Any) -> Any:
        self.calls.append((payload, options))
        reply = self.handler(payload)
        if isinstance(reply, Exception):
            raise reply
        return reply


def batch_handler(
    respond: Callable[[dict[str, Any]], dict[str, Any] | None],
    *,
    reverse: bool = False,
) -> Handler:
    """Build a handler answering each batch item with ``respond``.

    ``respond`` returns the response body without id/jsonrpc, or None to
    drop the item. ``reverse`` delivers responses in reverse order.
    """

    def handler(payload: Any) -> Any:
        responses = []
        for item in payload:
            body = respond(item)
            if body is not None:
                responses.append({"jsonrpc": "2.0", "id": item["id"], **body})
        return list(reversed(responses)) if reverse else responses

    return handler


@pytest.fixture
def make_transport() -> Callable[[Handler], StubTransport]:
    """Provide a factory for recording stub transports."""
    return StubTransport


@pytest.fixture
def make_batch_handler() -> Callable[..., Handler]:
    """Provide the batch handler builder."""
    return batch_handler


@pytest.fixture
def make_arguments() -> Callable[..., JsonRpcNamedArguments]:
    """Provide a factory for named arguments around a transport."""

    def factory(
        transport: Any, variant: Any = None, **transport_options: Any
    ) -> JsonRpcNamedArguments:
        return JsonRpcNamedArguments(
            transport=transport,
            transport_options=transport_options,
            variant=variant or ParityVariant(),
        )

    return factory


@pytest.fixture
def block_100() -> dict[str, Any]:
    """A post-London block with one embedded full transaction."""
    return {
        "number": "0x64",
        "hash": "0x" + "a1" * 32,
        "parentHash": "0x" + "a0" * 32,
        "nonce": "0x0000000000000042",
        "miner": "0x" + "11" * 20,
        "difficulty": "0x0",
        "totalDifficulty": "0xc70d815d562d3cfa955",
        "size": "0x220",
        "gasLimit": "0x1c9c380",
        "gasUsed": "0x5208",
        "baseFeePerGas": "0x7",
        "extraData": "0x",
        "timestamp": "0x5a4f5a1c",
        "transactions": [
            {
                "hash": "0x" + "b1" * 32,
                "blockHash": "0x" + "a1" * 32,
                "blockNumber": "0x64",
                "transactionIndex": "0x0",
                "from": "0x" + "22" * 20,
                "to": "0x" + "33" * 20,
                "value": "0xde0b6b3a7640000",
                "gas": "0x5208",
                "gasPrice": "0x3b9aca00",
                "nonce": "0x1",
                "input": "0x",
                "type": "0x0",
                "v": "0x25",
                "r": "0x1",
                "s": "0x2",
            }
        ],
    }


@pytest.fixture
def make_block(block_100: dict[str, Any]) -> Callable[[int], dict[str, Any]]:
    """Provide a factory for empty blocks at a given number."""

    def factory(number: int) -> dict[str, Any]:
        block = dict(block_100)
        block["number"] = hex(number)
        block["hash"] = "0x" + f"{number:064x}"
        block["transactions"] = []
        return block

    return factory
