import sys
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mode_analytics_provider.provider import ProviderContext  # noqa: E402
from mode_analytics_provider.utils.http import create_mode_client  # noqa: E402

MODE_HOST = "https://app.mode.com"
WORKSPACE = "acme"
API_BASE = f"{MODE_HOST}/api/{WORKSPACE}"


def pytest_configure(config):
    # Register the asyncio marker so pytest doesn't warn when it's used.
    config.addinivalue_line(
        "markers", "asyncio: mark test to run in an asyncio event loop"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "auth: mark test as testing authentication"
    )


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set required environment variables for tests.

    Settings resolve every required value from these unless a test
    passes explicit values or removes them.
    """
    monkeypatch.setenv("MODE_ANALYTICS_HOST", MODE_HOST)
    monkeypatch.setenv("MODE_ANALYTICS_API_TOKEN", "test-token")
    monkeypatch.setenv("MODE_ANALYTICS_API_SECRET", "test-secret")
    monkeypatch.setenv("MODE_ANALYTICS_WORKSPACE_ID", WORKSPACE)
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    yield


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests = []

        def record(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


def _scripted(*responses):
    queue = list(responses)

    def handler(request):
        status, body = queue.pop(0) if len(queue) > 1 else queue[0]
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    return handler


@pytest.fixture
def scripted():
    """Build a handler that replays ``(status, json)`` pairs in order.

    The last pair repeats once the script runs out.
    """
    return _scripted


@pytest.fixture
def make_context():
    """Factory for a ProviderContext whose client talks to a MockTransport."""
    def factory(handler):
        transport = RecordingTransport(handler)
        client = create_mode_client("test-token", "test-secret", transport=transport)
        context = ProviderContext(
            client=client, mode_host=MODE_HOST, workspace_id=WORKSPACE
        )
        return context, transport

    return factory


@pytest.fixture
def no_wait(monkeypatch):
    """Make every backoff and polling wait return immediately."""
    calls = []

    async def fake_wait(delay, cancel_event=None):
        calls.append(delay)
        return bool(cancel_event and cancel_event.is_set())

    monkeypatch.setattr(
        "mode_analytics_provider.utils.http.request.wait_or_cancel", fake_wait
    )
    monkeypatch.setattr(
        "mode_analytics_provider.utils.http.deletion.wait_or_cancel", fake_wait
    )
    return calls
