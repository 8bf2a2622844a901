"""HTTP request execution with rate-limit retry and response helpers.

This module provides the retrying request executor every handler goes
through. Mode answers bursts of API calls with HTTP 429; the executor
waits a fixed delay and tries again, up to a bounded number of attempts.
Nothing else is retried: transport failures surface immediately as
:class:`TransportError` and every other status is handed back to the
caller untouched.

Responses are read eagerly (never streamed), so the body is loaded and
the connection released before the caller sees the response.
"""

import asyncio
import json
import logging
from typing import Any, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ...exceptions import (
    APIError,
    DecodeError,
    OperationCancelledError,
    RateLimitError,
    TransportError,
)
from .waiting import run_or_cancel, wait_or_cancel

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

RATE_LIMIT_ATTEMPTS = 9
RATE_LIMIT_DELAY = 10.0


async def http_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    body: Optional[Any] = None,
    *,
    attempts: int = RATE_LIMIT_ATTEMPTS,
    delay: float = RATE_LIMIT_DELAY,
    cancel_event: Optional[asyncio.Event] = None,
) -> httpx.Response:
    """Send a request, retrying while the API answers 429 Too Many Requests.

    The loop is keyed only on rate limiting. The first non-429 response is
    returned as is, whatever its status. If every attempt is rate limited
    the last 429 response is returned and the caller inspects the status.

    :param client: Shared (authenticated) HTTP client
    :type client: httpx.AsyncClient
    :param method: HTTP method (e.g. 'GET', 'POST', 'PATCH', 'DELETE')
    :type method: str
    :param url: Fully-formed target URL
    :type url: str
    :param body: Optional JSON-serializable request body
    :type body: Optional[Any]
    :param attempts: Maximum number of requests to issue
    :type attempts: int
    :param delay: Seconds to wait after each 429 before retrying
    :type delay: float
    :param cancel_event: Event the host sets to abort the request or backoff
    :type cancel_event: Optional[asyncio.Event]
    :return: The last response received
    :rtype: httpx.Response
    :raises TransportError: If the request could not be built or sent
    :raises OperationCancelledError: If cancelled in flight or while backing off
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    method = method.upper()
    response: Optional[httpx.Response] = None

    for attempt in range(1, attempts + 1):
        try:
            request = client.build_request(method, url, json=body)
            cancelled, response = await run_or_cancel(
                client.send(request), cancel_event
            )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.error("Request %s %s failed: %s", method, url, e)
            raise TransportError(
                f"Unable to {method} {url}: {e}",
                url=url,
                method=method,
                cause=e,
            ) from e

        if cancelled:
            raise OperationCancelledError(
                f"{method} {url} cancelled while in flight", url=url
            )
        assert response is not None
        if response.status_code != httpx.codes.TOO_MANY_REQUESTS:
            if attempt > 1:
                logger.info(
                    "%s %s succeeded after %d attempts (status %d)",
                    method,
                    url,
                    attempt,
                    response.status_code,
                )
            return response

        if attempt == attempts:
            break

        logger.warning(
            "Rate limited on %s %s (attempt %d/%d), retrying in %.1fs",
            method,
            url,
            attempt,
            attempts,
            delay,
        )
        if await wait_or_cancel(delay, cancel_event):
            raise OperationCancelledError(
                f"{method} {url} cancelled while waiting out rate limit", url=url
            )

    logger.error("Still rate limited on %s %s after %d attempts", method, url, attempts)
    assert response is not None
    return response


def decode_json(response: httpx.Response, url: Optional[str] = None) -> Any:
    """Parse a response body as JSON.

    :param response: Response whose body was already read
    :type response: httpx.Response
    :param url: URL for error context (defaults to the request URL)
    :type url: Optional[str]
    :return: Parsed JSON document
    :rtype: Any
    :raises DecodeError: If the body is not valid JSON
    """
    url = url or str(response.request.url)
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(
            f"Error parsing response from {url}: {e}", url=url, cause=e
        ) from e


def parse_model(model: Type[ModelT], data: Any, url: str) -> ModelT:
    """Validate a decoded JSON document against a Pydantic model.

    :param model: Model class to validate with
    :type model: Type[ModelT]
    :param data: Decoded JSON document
    :type data: Any
    :param url: URL the document came from, for error context
    :type url: str
    :return: Validated model instance
    :rtype: ModelT
    :raises DecodeError: If the document does not have the model's shape
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodeError(
            f"Unexpected {model.__name__} shape in response from {url}: {e}",
            url=url,
            cause=e,
        ) from e


def raise_for_unexpected(
    response: httpx.Response,
    action: str,
    expected: int = httpx.codes.OK,
) -> None:
    """Raise a descriptive error unless ``response`` has the expected status.

    :param response: The response to check
    :type response: httpx.Response
    :param action: What the caller was doing, e.g. "create collection"
    :type action: str
    :param expected: The status code that counts as success
    :type expected: int
    :raises RateLimitError: If the API was still rate limiting
    :raises APIError: For any other unexpected status
    """
    if response.status_code == expected:
        return
    url = str(response.request.url)
    if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
        raise RateLimitError(
            f"Unable to {action}: still rate limited at {url}", url=url
        )
    raise APIError(
        f"Unable to {action}: received status {response.status_code} from {url}",
        url=url,
        status_code=response.status_code,
        response_body=response.text[:1000] if response.text else None,
    )


class HTTPResponse:
    """Wrapper for HTTP responses with convenient access methods.

    Caches the parsed JSON body and exposes the status helpers handlers
    use to branch on 200/404/4xx.
    """

    def __init__(self, response: httpx.Response):
        """Initialize the response wrapper.

        :param response: The underlying httpx.Response object
        :type response: httpx.Response
        """
        self.response = response
        self._json_cache: Optional[Any] = None

    @property
    def status_code(self) -> int:
        """HTTP status code of the response."""
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        """Response headers."""
        return self.response.headers

    @property
    def url(self) -> str:
        """URL the response was received from."""
        return str(self.response.request.url)

    def json(self) -> Any:
        """Get the response body as parsed JSON.

        :return: Parsed JSON response
        :rtype: Any
        :raises DecodeError: If the body is not valid JSON
        """
        if self._json_cache is None:
            self._json_cache = decode_json(self.response, self.url)
        return self._json_cache

    def embedded(self, key: str) -> list:
        """Return the items of a HAL ``_embedded`` collection listing.

        :param key: Collection key inside ``_embedded``
        :type key: str
        :return: Listed items (empty when the listing is empty)
        :rtype: list
        :raises DecodeError: If the body is not a HAL listing
        """
        data = self.json()
        if not isinstance(data, dict):
            raise DecodeError(f"Expected a JSON object from {self.url}", url=self.url)
        embedded = data.get("_embedded") or {}
        if not isinstance(embedded, dict):
            raise DecodeError(
                f"Expected _embedded to be an object in response from {self.url}",
                url=self.url,
            )
        items = embedded.get(key) or []
        if not isinstance(items, list):
            raise DecodeError(
                f"Expected _embedded.{key} to be a list in response from {self.url}",
                url=self.url,
            )
        return items

    def is_success(self) -> bool:
        """True if status code is in the 2xx range."""
        return 200 <= self.status_code < 300

    def is_not_found(self) -> bool:
        """True if the resource does not exist (404)."""
        return self.status_code == httpx.codes.NOT_FOUND

    def parse(self, model: Type[ModelT]) -> ModelT:
        """Parse the JSON body as ``model``.

        :raises DecodeError: If the body is not JSON or has the wrong shape
        """
        return parse_model(model, self.json(), self.url)

    def parse_embedded(self, key: str, model: Type[ModelT]) -> List[ModelT]:
        """Parse every item of a HAL listing as ``model``.

        :raises DecodeError: If the listing or any item has the wrong shape
        """
        return [parse_model(model, item, self.url) for item in self.embedded(key)]
