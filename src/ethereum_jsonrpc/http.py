"""HTTP transport for JSON-RPC over httpx."""

from asyncio import sleep
from collections.abc import Awaitable, Callable, Mapping
from functools import wraps
from types import TracebackType

from typing import Any, ParamSpec, Self, TypeVar

import httpx

from src.ethereum_jsonrpc.errors import ConfigurationError, TransportError
from src.ethereum_jsonrpc.transport import WirePayload
from src.helpers.constants import (
    CONNECTION_TIMEOUT,
    DEFAULT_TIMEOUT,
    MAX_CONNECTIONS,
    MAX_KEEPALIVE_CONNECTIONS,
    MAX_RETRIES,
    RETRY_BASE_DELAY,
    RETRY_MAX_DELAY,
)
from src.helpers.logging import get_logger


logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


def is_retryable(error: Exception) -> bool:
    """Connection failures, timeouts and overloaded-node statuses are retried."""
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(error, httpx.TransportError)


def retry_with_backoff(
    max_retries: int = MAX_RETRIES,
    base_delay: float = RETRY_BASE_DELAY,
    max_delay: float = RETRY_MAX_DELAY,
    *,
    should_retry: Callable[[Exception], bool] = is_retryable,
    log_errors: bool = True,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator to retry async functions with exponential backoff.

    Only errors accepted by ``should_retry`` are retried; anything else is
    raised on the first attempt.

    Args:
        max_retries: Maximum number of attempts
        base_delay: Initial delay in seconds
        max_delay: Maximum delay between retries
        should_retry: Predicate deciding whether an error is transient
        log_errors: Whether to log retry attempts

    Example:
        ```python
        @retry_with_backoff(max_retries=3, base_delay=2.0)
        async def post(client: httpx.AsyncClient, url: str) -> httpx.Response:
            response = await client.post(url, json={})
            response.raise_for_status()
            return response

        # Will retry up to 3 times with delays of 2s, 4s
        ```
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not should_retry(e) or attempt == max_retries - 1:
                        if log_errors and should_retry(e):
                            logger.error(
                                "%s failed after %d attempts: %s",
                                func.__name__,
                                max_retries,
                                e,
                            )
                        raise
                    if log_errors:
                        logger.warning(
                            "%s error (attempt %d/%d): %s",
                            func.__name__,
                            attempt + 1,
                            max_retries,
                            e,
                        )

                delay = min(base_delay * (2**attempt), max_delay)
                await sleep(delay)

            msg = f"{func.__name__} called with max_retries={max_retries}"
            raise RuntimeError(msg)

        return wrapper

    return decorator


def create_http_client(
    timeout: float = DEFAULT_TIMEOUT,
    max_connections: int = MAX_CONNECTIONS,
    max_keepalive_connections: int = MAX_KEEPALIVE_CONNECTIONS,
    **kwargs: Any,
) -> httpx.AsyncClient:
    """Create an httpx AsyncClient with an explicit connection pool."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout, connect=CONNECTION_TIMEOUT),
        limits=httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        ),
        **kwargs,
    )


class HTTPTransport:
    """POSTs JSON-RPC payloads to a node's HTTP endpoint.

    Pool size, timeout and retry policy are fixed at construction. Per-call
    ``options`` may override ``timeout`` and add ``headers``.

    Example:
        ```python
        async with HTTPTransport("http://localhost:8545") as transport:
            arguments = JsonRpcNamedArguments(
                transport=transport, transport_options={}, variant=ParityVariant()
            )
            balances = await fetch_balances(params_list, arguments)
        ```
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_connections: int = MAX_CONNECTIONS,
        max_keepalive_connections: int = MAX_KEEPALIVE_CONNECTIONS,
        max_retries: int = MAX_RETRIES,
        base_delay: float = RETRY_BASE_DELAY,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize HTTP transport.

        Args:
            url: JSON-RPC endpoint URL
            timeout: Default request timeout in seconds
            max_connections: Maximum total pooled connections
            max_keepalive_connections: Maximum idle pooled connections
            max_retries: Attempts per request for transient failures
            base_delay: Initial backoff delay in seconds
            client: Existing client to use instead of creating a pool

        Raises:
            ConfigurationError: If url is empty or max_retries is below 1
        """
        if not url:
            msg = "RPC URL cannot be empty"
            raise ConfigurationError(msg)
        if max_retries < 1:
            msg = "max_retries must be at least 1"
            raise ConfigurationError(msg)

        self.url = url
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._owns_client = client is None
        self.client = client or create_http_client(
            timeout,
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the connection pool if this transport created it."""
        if self._owns_client:
            await self.client.aclose()

    async def _post(
        self,
        payload: WirePayload,
        timeout: float,
        headers: Mapping[str, str] | None,
    ) -> httpx.Response:
        response = await self.client.post(
            self.url, json=payload, timeout=timeout, headers=headers
        )
        response.raise_for_status()
        return response

    async def send(self, payload: WirePayload, options: Mapping[str, Any]) -> Any:
        """POST the payload and return the decoded JSON body.

        Raises:
            TransportError: On connection failure, timeout, HTTP error status
                or a body that is not JSON
        """
        post = retry_with_backoff(self.max_retries, self.base_delay)(self._post)
        try:
            response = await post(
                payload,
                options.get("timeout", self.timeout),
                options.get("headers"),
            )
        except httpx.HTTPStatusError as e:
            msg = f"HTTP {e.response.status_code} from {self.url}: {e.response.text[:200]}"
            raise TransportError(msg) from e
        except httpx.HTTPError as e:
            raise TransportError(e) from e

        try:
            return response.json()
        except ValueError as e:
            msg = f"Response from {self.url} is not JSON: {response.text[:200]}"
            raise TransportError(msg) from e


__all__ = [
    "HTTPTransport",
    "create_http_client",
    "is_retryable",
    "retry_with_backoff",
]
