"""Mode Analytics provider entry point.

The provider resolves its configuration, creates the one authenticated
HTTP client shared by every handler and hands both to handlers through
an immutable :class:`ProviderContext`.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Type

import httpx

from .config.settings import Settings
from .data_sources import DATA_SOURCE_HANDLERS, DataSourceReader
from .resources import RESOURCE_HANDLERS, ResourceHandler
from .resources.base import TYPE_NAME_PREFIX
from .utils.http import create_mode_client
from .utils.security import setup_secure_logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderContext:
    """Configuration injected into every handler.

    :param client: Authenticated client shared by all handlers
    :param mode_host: Mode host URL without trailing slash
    :param workspace_id: Workspace the provider manages
    """

    client: httpx.AsyncClient
    mode_host: str
    workspace_id: str


class ModeAnalyticsProvider:
    """Terraform provider for the Mode Analytics REST API."""

    TYPE_NAME = TYPE_NAME_PREFIX

    def __init__(self):
        self.context: Optional[ProviderContext] = None
        self.settings: Optional[Settings] = None

    def configure(
        self,
        mode_host: Optional[str] = None,
        api_token: Optional[str] = None,
        api_secret: Optional[str] = None,
        workspace_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> ProviderContext:
        """Resolve settings and build the handler context.

        Values passed here win over ``MODE_ANALYTICS_*`` environment
        variables.

        :param mode_host: Mode host URL
        :type mode_host: Optional[str]
        :param api_token: API token
        :type api_token: Optional[str]
        :param api_secret: API secret
        :type api_secret: Optional[str]
        :param workspace_id: Workspace identifier
        :type workspace_id: Optional[str]
        :param transport: Optional transport for the HTTP client
        :type transport: Optional[httpx.AsyncBaseTransport]
        :return: The context handed to every handler
        :rtype: ProviderContext
        :raises ConfigurationError: If any required setting is missing
        """
        explicit = {
            "mode_host": mode_host,
            "api_token": api_token,
            "api_secret": api_secret,
            "workspace_id": workspace_id,
        }
        settings = Settings(
            **{key: value for key, value in explicit.items() if value is not None}
        ).require_complete()
        setup_secure_logging(settings.log_level)

        client = create_mode_client(
            settings.api_token,
            settings.api_secret,
            timeout=settings.request_timeout,
            transport=transport,
        )
        self.settings = settings
        self.context = ProviderContext(
            client=client,
            mode_host=settings.mode_host,
            workspace_id=settings.workspace_id,
        )
        logger.info(
            "Configured %s provider for workspace %s at %s",
            self.TYPE_NAME,
            settings.workspace_id,
            settings.mode_host,
        )
        return self.context

    def resources(self) -> Dict[str, Type[ResourceHandler]]:
        """Resource handlers keyed by full Terraform type name."""
        return {
            f"{self.TYPE_NAME}_{suffix}": handler
            for suffix, handler in RESOURCE_HANDLERS.items()
        }

    def data_sources(self) -> Dict[str, Type[DataSourceReader]]:
        """Data-source handlers keyed by full Terraform type name."""
        return {
            f"{self.TYPE_NAME}_{suffix}": handler
            for suffix, handler in DATA_SOURCE_HANDLERS.items()
        }

    def resource(
        self, type_name: str, cancel_event: Optional[asyncio.Event] = None
    ) -> ResourceHandler:
        """Instantiate the resource handler registered as ``type_name``.

        :raises KeyError: If no resource has that type name
        """
        return self.resources()[type_name](self._require_context(), cancel_event)

    def data_source(
        self, type_name: str, cancel_event: Optional[asyncio.Event] = None
    ) -> DataSourceReader:
        """Instantiate the data-source handler registered as ``type_name``.

        :raises KeyError: If no data source has that type name
        """
        return self.data_sources()[type_name](self._require_context(), cancel_event)

    async def aclose(self) -> None:
        """Close the shared HTTP client."""
        if self.context is not None:
            await self.context.client.aclose()
            self.context = None

    def _require_context(self) -> ProviderContext:
        if self.context is None:
            raise RuntimeError("Provider is not configured; call configure() first")
        return self.context
