"""Retrying HTTP calls for provider clients, built on tenacity."""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..core.exceptions import ProviderError, ProviderResponseError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


class RetryableStatusError(Exception):
    """Internal marker for HTTP statuses worth another attempt."""

    def __init__(self, response: httpx.Response):
        self.response = response
        super().__init__(f"HTTP {response.status_code}")


def _should_retry(exc: BaseException) -> bool:
    return isinstance(exc, (httpx.TransportError, RetryableStatusError))


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    provider: str,
    attempts: int = 3,
    wait_min: float = 1.0,
    wait_max: float = 10.0,
    **kwargs: Any,
) -> httpx.Response:
    """
    Issue an HTTP request, retrying transport errors and throttling statuses.

    Args:
        client: httpx AsyncClient instance
        method: HTTP method
        url: Endpoint URL
        provider: Provider name used in errors and logs
        attempts: Total attempts including the first
        wait_min: Lower bound of the exponential backoff in seconds
        wait_max: Upper bound of the exponential backoff in seconds
        **kwargs: Passed through to ``client.request``

    Returns:
        A successful (2xx) response

    Raises:
        ProviderError: On a non-success status or once retries are exhausted
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=wait_min, min=wait_min, max=wait_max),
        retry=retry_if_exception(_should_retry),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    try:
        async for attempt in retrying:
            with attempt:
                response = await client.request(method, url, **kwargs)
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise RetryableStatusError(response)
    except RetryableStatusError as e:
        raise ProviderError(
            f"{provider} returned HTTP {e.response.status_code} after {attempts} attempts",
            provider=provider,
            original_error=e,
            status_code=e.response.status_code,
        ) from e
    except httpx.HTTPError as e:
        raise ProviderError(
            f"{provider} request failed: {e.__class__.__name__}",
            provider=provider,
            original_error=e,
        ) from e

    if response.is_error:
        raise ProviderError(
            f"{provider} returned HTTP {response.status_code}",
            provider=provider,
            status_code=response.status_code,
            retryable=False,
        )
    return response


def json_body(response: httpx.Response, provider: str) -> Any:
    """Decode a JSON body, mapping decode failures to a provider error."""
    try:
        return response.json()
    except ValueError as e:
        raise ProviderResponseError("body is not valid JSON", provider, e) from e


def parse_model(model: type[M], payload: Any, provider: str) -> M:
    """Validate a decoded body against a response model."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ProviderResponseError(
            f"unexpected {model.__name__} shape", provider, e
        ) from e
