"""Batch request/response correlation by request id."""

from collections.abc import Callable, Iterable, Sequence

from typing import Any

from pydantic import BaseModel

from src.ethereum_jsonrpc.errors import BatchError, UnexpectedResponseIdError
from src.ethereum_jsonrpc.rpc_models import JsonRpcError, JsonRpcResponse
from src.helpers.logging import get_logger


logger = get_logger(__name__)

NO_RESPONSE_MESSAGE = "no_response"


def id_to_params[T](params_list: Iterable[T]) -> dict[int, T]:
    """Assign each params its position as the request id.

    Example:
        >>> id_to_params(["a", "b"])
        {0: 'a', 1: 'b'}
    """
    return dict(enumerate(params_list))


def default_annotation(params: Any) -> Any:
    """Render logical params as JSON-friendly error data."""
    if isinstance(params, BaseModel):
        return params.model_dump(mode="json")
    return params


def order_responses[T](
    responses: Iterable[JsonRpcResponse],
    id_to_params: dict[int, T],
) -> list[tuple[int, T, JsonRpcResponse | None]]:
    """Pair every request with its response, in request order.

    A request the transport never answered is paired with ``None``.

    Raises:
        UnexpectedResponseIdError: If a response id is absent from the map
            or answers the same request twice
    """
    by_id: dict[int, JsonRpcResponse] = {}
    for response in responses:
        if response.id not in id_to_params or response.id in by_id:
            raise UnexpectedResponseIdError(response.id)
        by_id[response.id] = response  # type: ignore[index]

    return [
        (request_id, params, by_id.get(request_id))
        for request_id, params in id_to_params.items()
    ]


class CorrelatedBatch(BaseModel):
    """Fold accumulator: successes paired with their params, or errors.

    Once any error is seen, successes stop accumulating; callers of the
    all-or-nothing operations only ever read one of the two lists.
    """

    successes: list[tuple[Any, Any]] = []
    errors: list[JsonRpcError] = []

    @property
    def ok(self) -> bool:
        return not self.errors

    def unwrap(self) -> list[tuple[Any, Any]]:
        """Return (params, result) pairs, or raise every error at once.

        Raises:
            BatchError: If any item of the batch failed
        """
        if self.errors:
            raise BatchError(self.errors)
        return self.successes


def _annotated_error(
    response: JsonRpcResponse | None,
    params: Any,
    annotate: Callable[[Any], Any],
) -> JsonRpcError:
    if response is None or response.error is None:
        return JsonRpcError(message=NO_RESPONSE_MESSAGE, data=annotate(params))
    return response.error.model_copy(update={"data": annotate(params)})


def correlate(
    responses: Sequence[JsonRpcResponse],
    id_to_params: dict[int, Any],
    *,
    annotate: Callable[[Any], Any] = default_annotation,
) -> CorrelatedBatch:
    """Map batch responses back to their params and partition them.

    Args:
        responses: Batch responses in any delivery order
        id_to_params: Mapping built by ``id_to_params``
        annotate: Builds the ``data`` attached to a failed item's error

    Returns:
        CorrelatedBatch with successes, or with every error in request order
        and successes discarded

    Raises:
        UnexpectedResponseIdError: If a response id was never requested
    """
    batch = CorrelatedBatch()

    for request_id, params, response in order_responses(responses, id_to_params):
        if response is None or response.is_error:
            if response is None:
                logger.warning("No response for request id %s", request_id)
            batch.errors.append(_annotated_error(response, params, annotate))
            batch.successes.clear()
        elif batch.ok:
            batch.successes.append((params, response.result))

    if not batch.ok:
        logger.warning(
            "%d of %d batch requests failed", len(batch.errors), len(id_to_params)
        )

    return batch


__all__ = [
    "NO_RESPONSE_MESSAGE",
    "CorrelatedBatch",
    "correlate",
    "default_annotation",
    "id_to_params",
    "order_responses",
]
