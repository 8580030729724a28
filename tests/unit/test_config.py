"""Unit tests for configuration loading and API path resolution."""

import pytest
from pydantic import ValidationError

from jira_attachments.auth import AuthType
from jira_attachments.config import (
    API_V2,
    API_V3,
    ClientConfig,
    InstallationType,
    load_config,
    resolve_api_paths,
)
from jira_attachments.utils.errors import CredentialsError


BASE_ENV = {
    "JIRA_SERVER": "https://jira.test.example.com/",
    "JIRA_LOGIN": "test",
    "JIRA_API_TOKEN": "token",
}


def test_resolve_api_paths():
    """Test flavor resolves to API v3 for cloud/unset and v2 for local."""
    assert resolve_api_paths(InstallationType.CLOUD) is API_V3
    assert resolve_api_paths(None) is API_V3
    assert resolve_api_paths(InstallationType.LOCAL) is API_V2


def test_api_paths_builders():
    assert API_V3.issue_attachments("TEST-1") == "/rest/api/3/issue/TEST-1/attachments"
    assert API_V2.attachment("10001") == "/rest/api/2/attachment/10001"
    assert API_V2.issue("TEST-1") == "/rest/api/2/issue/TEST-1"


def test_load_config_defaults():
    """Test minimal environment gives basic auth, cloud, 30s timeout."""
    config = load_config(BASE_ENV)

    assert config.server == "https://jira.test.example.com"
    assert config.login == "test"
    assert config.api_token == "token"
    assert config.auth_type == AuthType.BASIC
    assert config.installation is None
    assert config.api_paths is API_V3
    assert config.timeout == 30.0
    assert config.verify_ssl is True
    assert config.transport is None


def test_load_config_local_installation():
    config = load_config(dict(BASE_ENV, JIRA_INSTALLATION="LOCAL", JIRA_TIMEOUT="5"))

    assert config.installation == InstallationType.LOCAL
    assert config.api_paths is API_V2
    assert config.timeout == 5.0


def test_load_config_reads_os_environ(monkeypatch):
    for name, value in BASE_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setenv("JIRA_PROJECT_KEY", "TEST")

    config = load_config()

    assert config.project_key == "TEST"


def test_load_config_requires_server():
    with pytest.raises(CredentialsError, match="JIRA_SERVER"):
        load_config({"JIRA_LOGIN": "test", "JIRA_API_TOKEN": "token"})


def test_load_config_invalid_timeout():
    with pytest.raises(CredentialsError, match="JIRA_TIMEOUT"):
        load_config(dict(BASE_ENV, JIRA_TIMEOUT="soon"))


def test_load_config_mtls():
    """Test mutual TLS material is passed through as a cert pair."""
    config = load_config({
        "JIRA_SERVER": "https://jira.internal",
        "JIRA_AUTH_TYPE": "mtls",
        "JIRA_CLIENT_CERT": "/etc/jira/client.crt",
        "JIRA_CLIENT_KEY": "/etc/jira/client.key",
        "JIRA_VERIFY_SSL": "/etc/jira/ca.pem",
    })

    assert config.auth_type == AuthType.MTLS
    assert config.api_token is None
    assert config.cert == ("/etc/jira/client.crt", "/etc/jira/client.key")
    assert config.verify_ssl == "/etc/jira/ca.pem"


@pytest.mark.parametrize("value,expected", [
    ("false", False),
    ("0", False),
    ("true", True),
    ("", True),
])
def test_load_config_verify_ssl(value, expected):
    assert load_config(dict(BASE_ENV, JIRA_VERIFY_SSL=value)).verify_ssl is expected


def test_client_config_rejects_empty_server():
    with pytest.raises(ValidationError):
        ClientConfig(server="  ")


def test_client_config_rejects_non_positive_timeout():
    with pytest.raises(ValidationError):
        ClientConfig(server="https://jira.test.example.com", timeout=0)


def test_client_config_is_read_only():
    config = ClientConfig(server="https://jira.test.example.com")

    with pytest.raises(ValidationError):
        config.server = "https://elsewhere.example.com"
