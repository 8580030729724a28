"""Jira Authentication

Credential lookup from the environment and the request hook that applies
exactly one authentication scheme to every outgoing request.
"""

import os
import logging
from enum import Enum
from typing import Mapping, Optional, Tuple, TYPE_CHECKING

from requests.auth import AuthBase, HTTPBasicAuth

from .utils.errors import CredentialsError

if TYPE_CHECKING:
    from .config import ClientConfig

logger = logging.getLogger(__name__)


class AuthType(str, Enum):
    """Supported authentication schemes."""

    BASIC = "basic"
    BEARER = "bearer"
    MTLS = "mtls"


def get_auth_type(value: Optional[str]) -> AuthType:
    """Parse an auth type name, defaulting to basic when unset."""
    if not value:
        return AuthType.BASIC
    try:
        return AuthType(value.strip().lower())
    except ValueError:
        raise CredentialsError(
            f"Unknown auth type {value!r}",
            details={"supported": [t.value for t in AuthType]}
        )


def get_jira_credentials(
    auth_type: AuthType,
    environ: Optional[Mapping[str, str]] = None
) -> Tuple[Optional[str], Optional[str]]:
    """Read login and API token from the environment.

    Args:
        auth_type: Scheme the credentials are for
        environ: Mapping to read from (default: os.environ)

    Returns:
        Tuple of (login, api_token); either may be None where the scheme allows it

    Raises:
        CredentialsError: If the scheme requires a token that is not set
    """
    env = os.environ if environ is None else environ
    login = env.get("JIRA_LOGIN") or None
    token = env.get("JIRA_API_TOKEN") or None

    if auth_type in (AuthType.BASIC, AuthType.BEARER) and not token:
        raise CredentialsError(
            "JIRA_API_TOKEN environment variable is required",
            details={"auth_type": auth_type.value}
        )
    if auth_type == AuthType.BASIC and not login:
        raise CredentialsError(
            "JIRA_LOGIN environment variable is required for basic auth",
            details={"auth_type": auth_type.value}
        )

    return login, token


def apply_auth(request, config: "ClientConfig"):
    """Attach the configured credential to an outgoing request.

    Never fails: missing credentials leave the request unauthenticated and
    the server decides.
    """
    auth_type = config.auth_type or AuthType.BASIC
    token = config.api_token or ""

    if auth_type == AuthType.MTLS:
        # The TLS channel carries the primary identity
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
    elif auth_type == AuthType.BEARER:
        request.headers["Authorization"] = f"Bearer {token}"
    else:
        request = HTTPBasicAuth(config.login or "", token)(request)

    return request


class JiraAuth(AuthBase):
    """requests auth hook that delegates to apply_auth."""

    def __init__(self, config: "ClientConfig"):
        self.config = config

    def __call__(self, request):
        return apply_auth(request, self.config)
