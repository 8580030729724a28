"""Jira Client Configuration

ClientConfig is built once at startup (from the environment or explicitly by
the caller) and passed to JiraClient. ApiPaths resolves the installation
flavor into REST base paths a single time.
"""

import os
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union, Mapping

from pydantic import BaseModel, Field, field_validator
from requests.adapters import BaseAdapter

from .auth import AuthType, get_auth_type, get_jira_credentials
from .utils.errors import CredentialsError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class InstallationType(str, Enum):
    """Jira installation flavor."""

    CLOUD = "cloud"
    LOCAL = "local"


@dataclass(frozen=True)
class ApiPaths:
    """REST base path for one API generation and the paths built on it."""

    version: str
    base: str

    def issue(self, issue_key: str) -> str:
        return f"{self.base}/issue/{issue_key}"

    def issue_attachments(self, issue_key: str) -> str:
        return f"{self.base}/issue/{issue_key}/attachments"

    def attachment(self, attachment_id: str) -> str:
        return f"{self.base}/attachment/{attachment_id}"


API_V2 = ApiPaths(version="2", base="/rest/api/2")
API_V3 = ApiPaths(version="3", base="/rest/api/3")


def resolve_api_paths(installation: Optional[InstallationType]) -> ApiPaths:
    """Pick the API generation for an installation flavor (cloud when unset)."""
    if installation == InstallationType.LOCAL:
        return API_V2
    return API_V3


class ClientConfig(BaseModel):
    """Connection settings shared read-only by every transport call."""

    server: str = Field(description="Jira base URL, e.g. https://example.atlassian.net")
    login: Optional[str] = Field(default=None, description="Login (email on cloud)")
    api_token: Optional[str] = Field(default=None, description="API token or PAT")
    auth_type: Optional[AuthType] = Field(default=None, description="Auth scheme (basic when unset)")
    installation: Optional[InstallationType] = Field(
        default=None,
        description="cloud (API v3) or local (API v2); cloud when unset"
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds")
    verify_ssl: Union[bool, str] = Field(
        default=True,
        description="Verify TLS certificates, or path to a CA bundle"
    )
    client_cert: Optional[str] = Field(default=None, description="Client certificate for mutual TLS")
    client_key: Optional[str] = Field(default=None, description="Client key for mutual TLS")
    project_key: Optional[str] = Field(default=None, description="Default project key")
    transport: Optional[BaseAdapter] = Field(
        default=None,
        description="Transport adapter mounted for http:// and https://"
    )

    @field_validator('server')
    @classmethod
    def validate_server(cls, v: str) -> str:
        """Require a server URL and drop any trailing slash."""
        v = v.strip().rstrip('/')
        if not v:
            raise ValueError("Server URL cannot be empty")
        return v

    @field_validator('auth_type', 'installation', mode='before')
    @classmethod
    def empty_as_unset(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @property
    def api_paths(self) -> ApiPaths:
        return resolve_api_paths(self.installation)

    @property
    def cert(self):
        """Client certificate in the form requests expects, if configured."""
        if self.client_cert and self.client_key:
            return (self.client_cert, self.client_key)
        return self.client_cert

    class Config:
        arbitrary_types_allowed = True
        frozen = True


def _parse_verify(value: Optional[str]) -> Union[bool, str]:
    if value is None or value.strip() == "":
        return True
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    # Anything else is a CA bundle path
    return value


def load_config(environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """Build a ClientConfig from JIRA_* environment variables.

    Raises:
        CredentialsError: If the server URL or required credentials are missing
    """
    env = os.environ if environ is None else environ

    server = env.get("JIRA_SERVER")
    if not server:
        raise CredentialsError("JIRA_SERVER environment variable is required.")

    auth_type = get_auth_type(env.get("JIRA_AUTH_TYPE"))
    login, token = get_jira_credentials(auth_type, env)

    timeout = env.get("JIRA_TIMEOUT")
    try:
        timeout_value = float(timeout) if timeout else DEFAULT_TIMEOUT
    except ValueError:
        raise CredentialsError(f"JIRA_TIMEOUT must be a number, got {timeout!r}")

    config = ClientConfig(
        server=server,
        login=login,
        api_token=token,
        auth_type=auth_type,
        installation=env.get("JIRA_INSTALLATION") or None,
        timeout=timeout_value,
        verify_ssl=_parse_verify(env.get("JIRA_VERIFY_SSL")),
        client_cert=env.get("JIRA_CLIENT_CERT") or None,
        client_key=env.get("JIRA_CLIENT_KEY") or None,
        project_key=env.get("JIRA_PROJECT_KEY") or None,
    )
    logger.info(
        f"Loaded configuration for {config.server} "
        f"(installation: {(config.installation or InstallationType.CLOUD).value}, "
        f"auth: {auth_type.value})"
    )
    return config
