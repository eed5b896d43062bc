"""
Shared fixtures for proxy tests.
"""

from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from service_proxy.app.main import ProxyService
from shared.config import get_config


class UpstreamStub:
    """Records outbound requests and answers them with ``handler``."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(200, json={})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def respond_with(self, status_code: int = 200, **kwargs) -> None:
        self.handler = lambda request: httpx.Response(status_code, **kwargs)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


def build_service(upstream: UpstreamStub, **overrides) -> ProxyService:
    """ProxyService whose upstream clients all talk to ``upstream``."""
    settings = {"throttle_min_interval_seconds": 0.0, "openai_api_key": "sk-test"}
    settings.update(overrides)
    service = ProxyService(get_config("proxy", **settings))

    transport = httpx.MockTransport(upstream)
    service.market_data_client.transport = transport
    service.discussion_client.transport = transport
    service.completion_client.transport = transport
    return service


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for name in ("OPENAI_API_KEY", "PROXY_OPENAI_API_KEY", "PROXY_ENV", "PORT", "PROXY_PORT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def service(upstream):
    return build_service(upstream)


@pytest.fixture
def client(service):
    return TestClient(service.app)


@pytest.fixture
def make_service(upstream):
    """Factory for services with non-default settings."""
    def _make(**overrides) -> ProxyService:
        return build_service(upstream, **overrides)
    return _make
