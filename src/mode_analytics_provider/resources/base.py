"""Base classes shared by resource and data-source handlers.

Handlers receive the immutable ``ProviderContext`` when they are
constructed and never reach for global state. Every API
call goes through :func:`http_retry`; deletes additionally go through
:func:`check_deletion` before the handler reports success.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Generic, Optional, Tuple, TypeVar

from ..exceptions import (
    DeletionTimeoutError,
    DeletionVerificationError,
    ModeProviderError,
)
from ..models.base import ModeModel
from ..utils.http import HTTPResponse, check_deletion, http_retry, raise_for_unexpected

if TYPE_CHECKING:
    from ..provider import ProviderContext

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=ModeModel)

TYPE_NAME_PREFIX = "modeanalytics"


class BaseHandler:
    """Common plumbing for handlers bound to one configured provider.

    :param context: Provider configuration and shared client
    :type context: ProviderContext
    :param cancel_event: Event the host sets to abort waits in progress
    :type cancel_event: Optional[asyncio.Event]
    """

    type_suffix: str = ""

    def __init__(
        self,
        context: "ProviderContext",
        cancel_event: Optional[asyncio.Event] = None,
    ):
        self.context = context
        self.cancel_event = cancel_event

    @property
    def type_name(self) -> str:
        """Terraform type name, e.g. ``modeanalytics_collection``."""
        return f"{TYPE_NAME_PREFIX}_{self.type_suffix}"

    def url(self, *parts: str) -> str:
        """Build ``{host}/api/{workspace}/<parts>``."""
        base = f"{self.context.mode_host}/api/{self.context.workspace_id}"
        if not parts:
            return base
        return base + "/" + "/".join(parts)

    async def request(
        self, method: str, url: str, body: Optional[Any] = None
    ) -> HTTPResponse:
        """Send one API call through the rate-limit retry executor."""
        response = await http_retry(
            self.context.client,
            method,
            url,
            body,
            cancel_event=self.cancel_event,
        )
        return HTTPResponse(response)

    async def request_ok(
        self, method: str, url: str, action: str, body: Optional[Any] = None
    ) -> HTTPResponse:
        """Send an API call and require a 200 response.

        :raises APIError: If the response status is not 200
        """
        response = await self.request(method, url, body)
        raise_for_unexpected(response.response, action)
        return response


class ResourceHandler(BaseHandler, Generic[ModelT]):
    """Base class for managed resources.

    Subclasses implement ``create``, ``read``, ``update``, ``delete`` and
    ``import_state``. ``read`` returns ``None`` when the resource is gone
    and should be removed from state.
    """

    #: Extra context appended to deletion verification failures.
    deletion_hint: Optional[str] = None

    async def create(self, plan: ModelT) -> ModelT:
        raise NotImplementedError

    async def read(self, state: ModelT) -> Optional[ModelT]:
        raise NotImplementedError

    async def update(self, plan: ModelT, state: ModelT) -> ModelT:
        raise NotImplementedError

    async def delete(self, state: ModelT) -> None:
        raise NotImplementedError

    async def import_state(self, import_id: str) -> ModelT:
        raise NotImplementedError

    async def delete_and_verify(self, url: str, action: str) -> None:
        """DELETE ``url`` and wait until the API confirms the removal.

        :param url: Item URL of the resource
        :type url: str
        :param action: Description for error messages, e.g. "delete group"
        :type action: str
        :raises APIError: If the DELETE itself does not return 200
        :raises DeletionTimeoutError: If removal is never confirmed
        :raises DeletionVerificationError: If verification hits an error status
        """
        await self.request_ok("DELETE", url, action)
        try:
            await check_deletion(
                url, self.context.client, cancel_event=self.cancel_event
            )
        except (DeletionTimeoutError, DeletionVerificationError) as e:
            if self.deletion_hint:
                e.message = f"{e.message}. {self.deletion_hint}"
                e.details["hint"] = self.deletion_hint
                e.args = (e.message,)
            logger.error("Failed to verify %s at %s: %s", action, url, e.message)
            raise
        logger.info("Verified %s at %s", action, url)


def split_import_id(import_id: str, parent: str, child: str) -> Tuple[str, str]:
    """Split a ``<parent>/<child>`` import identifier.

    :raises ModeProviderError: If the identifier does not have two parts
    """
    parts = import_id.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise ModeProviderError(
            f"Expected import ID in the form <{parent}>/<{child}>, got {import_id!r}",
            code="INVALID_IMPORT_ID",
            details={"import_id": import_id},
        )
    return parts[0], parts[1]
