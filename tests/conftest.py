from __future__ import annotations

import os
from typing import List

import pytest

from sfclient.auth import AuthenticationFlow, AuthenticationInfo
from sfclient.client import SalesforceClient
from sfclient.transport import RestRequest, RestResponse


class FakeTransport:
    """Records executed requests and replays canned responses in order."""

    def __init__(self, *responses: RestResponse):
        self.responses: List[RestResponse] = list(responses)
        self.requests: List[RestRequest] = []
        self.base_url = None

    def queue(self, status_code, content="", error_exception=None) -> FakeTransport:
        self.responses.append(
            RestResponse(status_code=status_code, content=content, error_exception=error_exception)
        )
        return self

    def execute(self, request: RestRequest) -> RestResponse:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError("FakeTransport has no response queued")
        return self.responses.pop(0)

    @property
    def last_url(self) -> str:
        return self.requests[-1].build_url(self.base_url)


class StaticFlow(AuthenticationFlow):
    def __init__(self, access_token="tok", instance_url="https://x"):
        self.info = AuthenticationInfo(access_token, instance_url)
        self.calls = 0

    def authenticate(self) -> AuthenticationInfo:
        self.calls += 1
        return self.info


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport) -> SalesforceClient:
    """An authenticated client wired to the fake transport."""
    c = SalesforceClient(transport)
    c.authenticate(StaticFlow("00DFAKE-TOKEN", "https://example.my.salesforce.com"))
    return c


@pytest.fixture(autouse=True)
def _clean_sf_env(monkeypatch):
    """Keep developer SF_* variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("SF_"):
            monkeypatch.delenv(name, raising=False)
