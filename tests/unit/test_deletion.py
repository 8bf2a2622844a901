"""Unit tests for deletion verification."""

import asyncio

import httpx
import pytest

from mode_analytics_provider.exceptions import (
    DecodeError,
    DeletionTimeoutError,
    DeletionVerificationError,
    OperationCancelledError,
    TransportError,
)
from mode_analytics_provider.utils.http import (
    DeletionState,
    check_deletion,
    collection_listing_url,
    is_nested_collection_item_url,
)

COLLECTION_URL = "https://app.mode.com/api/acme/spaces/tok1"
GROUP_URL = "https://app.mode.com/api/acme/groups/grp1"
LISTING_URL = "https://app.mode.com/api/acme/spaces?filter=all"


class TestUrlHelpers:
    """URL shape predicate behind the 403 workaround."""

    @pytest.mark.parametrize(
        "url",
        [
            COLLECTION_URL,
            "https://example.mode.com/api/ws-2/spaces/abc123",
        ],
    )
    def test_matches_collection_items(self, url):
        assert is_nested_collection_item_url(url)

    @pytest.mark.parametrize(
        "url",
        [
            GROUP_URL,
            "https://app.mode.com/api/acme/spaces/tok1/permissions/p1",
            "https://app.mode.com/api/acme/spaces/tok1/",
            "http://app.mode.com/api/acme/spaces/tok1",
            "https://app.mode.com/api/acme/spaces",
        ],
    )
    def test_rejects_other_shapes(self, url):
        assert not is_nested_collection_item_url(url)

    def test_listing_url(self):
        assert collection_listing_url(COLLECTION_URL) == LISTING_URL


@pytest.mark.asyncio
class TestCheckDeletion:
    """State transitions of check_deletion."""

    async def test_not_found_confirms(self, make_context, scripted, no_wait):
        context, transport = make_context(scripted((404, None)))

        state = await check_deletion(GROUP_URL, context.client)

        assert state is DeletionState.CONFIRMED_DELETED
        assert len(transport.requests) == 1
        # The first poll happens one tick after the call
        assert no_wait == [10.0]

    async def test_keeps_polling_while_live(self, make_context, scripted, no_wait):
        context, transport = make_context(
            scripted(
                (200, {"state": "active"}),
                (200, {"state": "active"}),
                (404, None),
            )
        )

        state = await check_deletion(GROUP_URL, context.client)

        assert state is DeletionState.CONFIRMED_DELETED
        assert len(transport.requests) == 3
        assert all(r.method == "GET" for r in transport.requests)

    async def test_soft_deleted_confirms(self, make_context, scripted, no_wait):
        context, transport = make_context(scripted((200, {"state": "soft_deleted"})))

        state = await check_deletion(GROUP_URL, context.client)

        assert state is DeletionState.CONFIRMED_DELETED
        assert len(transport.requests) == 1

    async def test_forbidden_collection_with_readable_listing(
        self, make_context, no_wait
    ):
        def handler(request):
            if request.url.path.endswith("/spaces/tok1"):
                return httpx.Response(403)
            return httpx.Response(200, json={"_embedded": {"spaces": []}})

        context, transport = make_context(handler)

        state = await check_deletion(COLLECTION_URL, context.client)

        assert state is DeletionState.CONFIRMED_DELETED
        assert [str(r.url) for r in transport.requests] == [
            COLLECTION_URL,
            LISTING_URL,
        ]

    async def test_forbidden_collection_with_unreadable_listing(
        self, make_context, no_wait
    ):
        def handler(request):
            if request.url.path.endswith("/spaces/tok1"):
                return httpx.Response(403)
            return httpx.Response(401)

        context, transport = make_context(handler)

        with pytest.raises(DeletionVerificationError) as exc_info:
            await check_deletion(COLLECTION_URL, context.client)

        error = exc_info.value
        assert error.status_code == 403
        assert error.url == COLLECTION_URL
        assert error.listing_url == LISTING_URL
        assert error.listing_status == 401
        assert error.details["listing_status"] == 401
        assert LISTING_URL in str(error)
        assert len(transport.requests) == 2

    async def test_forbidden_elsewhere_is_an_error(self, make_context, scripted, no_wait):
        context, transport = make_context(scripted((403, None)))

        with pytest.raises(DeletionVerificationError) as exc_info:
            await check_deletion(GROUP_URL, context.client)

        assert exc_info.value.status_code == 403
        # No listing recheck for non-collection URLs
        assert len(transport.requests) == 1

    async def test_unexpected_status_is_an_error(self, make_context, scripted, no_wait):
        context, transport = make_context(scripted((500, {"error": "oops"})))

        with pytest.raises(DeletionVerificationError) as exc_info:
            await check_deletion(GROUP_URL, context.client)

        assert exc_info.value.status_code == 500
        assert "500" in str(exc_info.value)
        assert GROUP_URL in str(exc_info.value)
        assert len(transport.requests) == 1

    async def test_non_object_body(self, make_context, scripted, no_wait):
        context, _ = make_context(scripted((200, ["active"])))

        with pytest.raises(DecodeError):
            await check_deletion(GROUP_URL, context.client)

    async def test_transport_error(self, make_context, no_wait):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        context, _ = make_context(handler)

        with pytest.raises(TransportError) as exc_info:
            await check_deletion(GROUP_URL, context.client)
        assert exc_info.value.url == GROUP_URL

    async def test_cancel_before_first_poll(self, make_context, scripted, no_wait):
        context, transport = make_context(scripted((404, None)))
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(OperationCancelledError):
            await check_deletion(GROUP_URL, context.client, cancel_event=cancel)

        assert transport.requests == []

    async def test_cancel_while_waiting(self, make_context, scripted):
        context, transport = make_context(scripted((200, {"state": "active"})))
        cancel = asyncio.Event()

        task = asyncio.create_task(
            check_deletion(
                GROUP_URL,
                context.client,
                interval=0.01,
                timeout=30,
                cancel_event=cancel,
            )
        )
        while not transport.requests:
            await asyncio.sleep(0.005)
        cancel.set()

        with pytest.raises(OperationCancelledError):
            await task

    async def test_cancel_while_poll_in_flight(self, make_context):
        async def slow_handler(request):
            await asyncio.sleep(10)
            return httpx.Response(404)

        context, transport = make_context(slow_handler)
        cancel = asyncio.Event()

        task = asyncio.create_task(
            check_deletion(
                GROUP_URL,
                context.client,
                interval=0.001,
                timeout=30,
                cancel_event=cancel,
            )
        )
        while not transport.requests:
            await asyncio.sleep(0.001)
        cancel.set()

        with pytest.raises(OperationCancelledError) as exc_info:
            await asyncio.wait_for(task, timeout=1.0)
        assert exc_info.value.url == GROUP_URL
        assert len(transport.requests) == 1

    async def test_times_out_while_live(self, make_context, scripted):
        context, transport = make_context(scripted((200, {"state": "active"})))

        with pytest.raises(DeletionTimeoutError) as exc_info:
            await check_deletion(
                GROUP_URL, context.client, interval=0.02, timeout=0.1
            )

        error = exc_info.value
        assert error.url == GROUP_URL
        assert error.timeout == 0.1
        assert error.polls == len(transport.requests)
        assert 1 <= error.polls <= 5

    async def test_interval_longer_than_timeout(self, make_context, scripted):
        context, transport = make_context(scripted((404, None)))

        with pytest.raises(DeletionTimeoutError) as exc_info:
            await check_deletion(
                GROUP_URL, context.client, interval=0.05, timeout=0.01
            )

        assert exc_info.value.polls == 0
        assert transport.requests == []

    async def test_short_real_interval(self, make_context, scripted):
        context, transport = make_context(
            scripted((200, {"state": "active"}), (200, {"state": "soft_deleted"}))
        )

        state = await check_deletion(
            GROUP_URL, context.client, interval=0.001, timeout=5
        )

        assert state is DeletionState.CONFIRMED_DELETED
        assert len(transport.requests) == 2
