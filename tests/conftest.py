"""Shared test fixtures for cf-terraforming.

API traffic is replayed from JSON cassettes under ``tests/testdata/cassettes``
through ``httpx.MockTransport``, so no test touches the real Cloudflare API.
Each cassette is a list of interactions::

    [{"request": {"path": "/client/v4/...", "query": {"page": "1"}},
      "response": {"status": 200, "body": {...}}}]

A request matches the first interaction whose path is equal and whose query
items are all present in the request. Expected output lives under
``tests/testdata/golden`` and is compared byte-for-byte.
"""

import json
from pathlib import Path

import httpx
import pytest

from cf_terraforming.client import CloudflareClient
from cf_terraforming.config import Settings, reset_config

TESTDATA = Path(__file__).parent / "testdata"


@pytest.fixture(autouse=True)
def _reset_global_config(monkeypatch):
    """Reset global config and drop any real Cloudflare credentials."""
    for var in (
        "CLOUDFLARE_API_TOKEN",
        "CLOUDFLARE_EMAIL",
        "CLOUDFLARE_API_KEY",
        "CLOUDFLARE_API_USER_SERVICE_KEY",
        "CLOUDFLARE_ACCOUNT_ID",
        "CLOUDFLARE_ZONE_ID",
        "CLOUDFLARE_API_HOSTNAME",
        "CLOUDFLARE_LOG_LEVEL",
        "CLOUDFLARE_LOG_FORMAT",
        "CLOUDFLARE_MAX_WORKERS",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


class Cassette:
    """Replays recorded API interactions and keeps a log of requests."""

    def __init__(self, interactions):
        self.interactions = interactions
        self.requests = []

    @classmethod
    def load(cls, name: str) -> "Cassette":
        path = TESTDATA / "cassettes" / f"{name}.json"
        return cls(json.loads(path.read_text(encoding="utf-8")))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for interaction in self.interactions:
            expected = interaction["request"]
            if expected.get("method", "GET") != request.method:
                continue
            if expected["path"] != request.url.path:
                continue
            query = expected.get("query", {})
            if all(request.url.params.get(k) == str(v) for k, v in query.items()):
                response = interaction["response"]
                return httpx.Response(response.get("status", 200), json=response["body"])
        return httpx.Response(
            404,
            json={
                "success": False,
                "errors": [{"code": 7003, "message": f"No route for {request.url}"}],
                "messages": [],
                "result": None,
            },
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def build_cassette():
    """Return a constructor for inline cassettes."""
    return Cassette


@pytest.fixture
def load_cassette():
    """Return a loader for named cassettes."""
    return Cassette.load


@pytest.fixture
def golden():
    """Return a reader for golden output files."""

    def _read(name: str) -> str:
        return (TESTDATA / "golden" / name).read_text(encoding="utf-8")

    return _read


@pytest.fixture
def settings():
    """Settings with a dummy token."""
    return Settings(api_token="test-token")


@pytest.fixture
def make_client(settings):
    """Build a ``CloudflareClient`` replaying the given cassette."""
    clients = []

    def _make(cassette: Cassette, client_settings: Settings = None) -> CloudflareClient:
        client = CloudflareClient(client_settings or settings, transport=cassette.transport)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
