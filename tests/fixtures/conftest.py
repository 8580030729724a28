"""Pytest fixtures for Jira attachment client tests.

Common fixtures for faking the Jira server at the transport level.
"""

import io
from http import HTTPStatus
from typing import Callable, List, Optional, Tuple
from urllib.parse import urlsplit, parse_qs

import pytest
from requests import Response
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from jira_attachments.client import JiraClient
from jira_attachments.config import ClientConfig
from . import jira_responses

SERVER = "https://jira.test.example.com"

Reply = Tuple[int, bytes, dict]


class FakeTransport(BaseAdapter):
    """Transport adapter that records requests and answers from a handler.

    The handler receives the PreparedRequest and returns
    (status, body, headers). Raising from the handler simulates a network
    failure.
    """

    def __init__(self, handler: Optional[Callable] = None):
        super().__init__()
        self.handler = handler or (lambda request: (200, b"", {}))
        self.requests: List = []
        self.timeouts: List = []

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        self.timeouts.append(timeout)

        status, body, headers = self.handler(request)
        if isinstance(body, str):
            body = body.encode("utf-8")

        response = Response()
        response.status_code = status
        response.reason = HTTPStatus(status).phrase
        response.headers = CaseInsensitiveDict(headers or {})
        response.raw = body if hasattr(body, "read") else io.BytesIO(body)
        response.url = request.url
        response.request = request
        response.encoding = "utf-8"
        return response

    def close(self):
        pass

    @property
    def paths(self) -> List[str]:
        return [urlsplit(r.url).path for r in self.requests]


def path_of(request) -> str:
    return urlsplit(request.url).path


def query_of(request) -> dict:
    return parse_qs(urlsplit(request.url).query)


def json_reply(payload, status: int = 200) -> Reply:
    return status, jira_responses.as_body(payload), {"Content-Type": "application/json"}


def make_client(
    handler: Optional[Callable] = None,
    **config_overrides
) -> Tuple[JiraClient, FakeTransport]:
    """Build a JiraClient wired to a FakeTransport."""
    transport = FakeTransport(handler)
    settings = {
        "server": SERVER,
        "login": "test",
        "api_token": "token",
        "timeout": 3.0,
        "transport": transport,
    }
    settings.update(config_overrides)
    return JiraClient(ClientConfig(**settings)), transport


@pytest.fixture
def client_factory():
    """Factory returning (client, transport) for a handler and config overrides."""
    return make_client


@pytest.fixture
def mock_issue():
    """Mock issue with two attachments."""
    return dict(jira_responses.MOCK_ISSUE)


@pytest.fixture
def upload_file(tmp_path):
    """A small local file to upload."""
    path = tmp_path / "test.txt"
    path.write_bytes(b"test content")
    return path


@pytest.fixture(autouse=True)
def reset_environment_for_tests(monkeypatch):
    """Reset environment variables for each test.

    This fixture automatically runs before each test so configuration
    loaded from the environment never leaks from the developer's shell.
    """
    for name in (
        "JIRA_SERVER", "JIRA_LOGIN", "JIRA_API_TOKEN", "JIRA_AUTH_TYPE",
        "JIRA_INSTALLATION", "JIRA_TIMEOUT", "JIRA_VERIFY_SSL",
        "JIRA_CLIENT_CERT", "JIRA_CLIENT_KEY", "JIRA_PROJECT_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
