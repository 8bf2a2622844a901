"""Authenticated HTTP client for the Mode Analytics API.

This module provides the shared client every resource and data-source
handler uses. The client intercepts each outgoing request and injects
HTTP Basic credentials together with the fixed JSON/HAL headers Mode
expects, so handlers only ever deal with URLs, methods and bodies.

Examples:
    >>> client = create_mode_client("token", "secret")
    >>> response = await client.get("https://app.mode.com/api/acme/groups")
"""

import base64
import logging
from typing import Optional

import httpx

from ..security import sanitize_headers

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json"
ACCEPT = "application/hal+json"


def basic_auth_header(api_token: str, api_secret: str) -> str:
    """Build the ``Authorization`` value for a token/secret pair.

    :param api_token: API token (Basic auth username)
    :type api_token: str
    :param api_secret: API secret (Basic auth password)
    :type api_secret: str
    :return: Header value of the form ``Basic <base64>``
    :rtype: str
    """
    raw = f"{api_token}:{api_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


class ModeAuthenticatedClient(httpx.AsyncClient):
    """HTTP client that authenticates every request against Mode.

    The client is built once when the provider is configured and shared,
    read-only, by every handler. ``send`` is the single interception
    point: it is reached by ``request()``/``get()``/``stream()`` alike.

    :param api_token: API token (Basic auth username)
    :type api_token: str
    :param api_secret: API secret (Basic auth password)
    :type api_secret: str
    """

    def __init__(self, *args, api_token: str, api_secret: str, **kwargs):
        super().__init__(*args, **kwargs)
        self._authorization = basic_auth_header(api_token, api_secret)

    async def send(self, request: httpx.Request, **kwargs) -> httpx.Response:
        """Inject credentials and fixed headers, then send.

        :param request: The HTTP request to send
        :type request: httpx.Request
        :return: The HTTP response
        :rtype: httpx.Response
        """
        if not request.extensions.get("auth_injected"):
            request.extensions["auth_injected"] = True
            self._inject_headers(request)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "=== SEND: %s %s headers=%s",
                request.method,
                request.url,
                sanitize_headers(dict(request.headers)),
            )

        return await super().send(request, **kwargs)

    def _inject_headers(self, request: httpx.Request) -> None:
        """Set Basic auth and the JSON/HAL headers on a request in place.

        :param request: The HTTP request to modify
        :type request: httpx.Request
        """
        request.headers["Authorization"] = self._authorization
        request.headers["Content-Type"] = CONTENT_TYPE
        request.headers["Accept"] = ACCEPT


def create_timeout(seconds: float = 30.0) -> httpx.Timeout:
    """Create a timeout configuration object.

    :param seconds: Read/write timeout in seconds
    :type seconds: float
    :return: Configured timeout object
    :rtype: httpx.Timeout
    """
    return httpx.Timeout(seconds, connect=min(seconds, 10.0))


def create_mode_client(
    api_token: str,
    api_secret: str,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ModeAuthenticatedClient:
    """Factory function to create the shared authenticated client.

    :param api_token: API token (Basic auth username)
    :param api_secret: API secret (Basic auth password)
    :param timeout: Per-request timeout in seconds
    :param transport: Optional transport override (used by tests)
    :return: Configured authenticated client
    """
    return ModeAuthenticatedClient(
        api_token=api_token,
        api_secret=api_secret,
        timeout=create_timeout(timeout),
        limits=httpx.Limits(
            max_keepalive_connections=10,
            max_connections=20,
            keepalive_expiry=30.0,
        ),
        follow_redirects=True,
        transport=transport,
    )
