import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from unipile.http_client import HttpClient
from unipile.models import UnipileConfig

TEST_DSN = "api.test:13624"
TEST_API_KEY = "test-key"


class FakeClock:
    """Deterministic clock returning seconds since the epoch."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class ScriptedApi:
    """
    Stand-in for the remote API.

    Queued items are replayed in order: httpx.Response objects are returned,
    exceptions are raised from the transport. Every request is recorded.
    """

    def __init__(self):
        self.requests = []
        self.responses = []

    def queue(self, *items):
        self.responses.extend(items)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.responses.pop(0) if self.responses else httpx.Response(200, json={})
        if isinstance(item, BaseException):
            raise item
        return item

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last_request.content)


@pytest.fixture
def fake_clock():
    """Fixture providing a controllable clock for rate limiter tests."""
    return FakeClock()


@pytest.fixture
def mock_sleep():
    """Fixture to mock asyncio.sleep to avoid actual waiting in tests."""
    with patch('asyncio.sleep', new_callable=AsyncMock) as mock:
        yield mock


@pytest.fixture
def api():
    """Fixture for a scripted API that records the requests it receives."""
    return ScriptedApi()


@pytest.fixture
def make_http_client(api):
    """Fixture building HttpClients wired to the scripted API."""

    def factory(**options):
        config = UnipileConfig(**{'dsn': TEST_DSN, 'api_key': TEST_API_KEY, **options})
        return HttpClient(config, transport=api.transport)

    return factory
