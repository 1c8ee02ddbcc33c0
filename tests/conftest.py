"""Shared fixtures: a stub Open Access API built on httpx.MockTransport."""

import logging
from typing import Callable

import httpx
import pytest

from smithsonian_open_access.client import OpenAccessClient
from smithsonian_open_access.models import ApiSettings


class StubApi:
    """Records every request and answers with a configurable response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.payload: object = {"status": 200, "response": {"rowCount": 0, "rows": []}}
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.payload, str):
            return httpx.Response(self.status_code, text=self.payload)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def stub_api():
    """Stub API answering 200 with an empty result set."""
    return StubApi()


@pytest.fixture
def api_settings():
    """Settings with every endpoint configured."""
    return ApiSettings(api_key="test-key", terms_endpoint="terms/:category")


@pytest.fixture
def client_logger():
    return logging.getLogger("tests.open_access_client")


@pytest.fixture
def make_client(stub_api, client_logger):
    """Build a client wired to the stub API."""
    http_clients: list[httpx.Client] = []

    def factory(settings: ApiSettings) -> OpenAccessClient:
        http = httpx.Client(transport=httpx.MockTransport(stub_api))
        http_clients.append(http)
        return OpenAccessClient(config_provider=lambda: settings, http=http, logger=client_logger)

    yield factory

    for http in http_clients:
        http.close()


@pytest.fixture
def api(make_client, api_settings) -> OpenAccessClient:
    """Client wired to the stub API with the default test settings."""
    return make_client(api_settings)


@pytest.fixture
def client_warnings(caplog, client_logger) -> Callable[[], list[logging.LogRecord]]:
    """Warnings the client logged so far in this test."""
    caplog.set_level(logging.INFO, logger=client_logger.name)

    def collect() -> list[logging.LogRecord]:
        return [
            r for r in caplog.records
            if r.name == client_logger.name and r.levelno == logging.WARNING
        ]

    return collect
