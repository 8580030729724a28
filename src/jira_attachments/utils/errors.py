"""Jira Attachment Error Handling Utilities

Custom exception classes for attachment transfers, so callers can tell a
local file problem from a network outage or a server-side rejection.
"""

from typing import Optional, Dict, Any, List


class JiraError(Exception):
    """Base exception for all attachment-related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize Jira error.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class CredentialsError(JiraError):
    """Raised when configuration lacks a server URL or required credentials."""

    pass


class FileAccessError(JiraError):
    """Raised when a local file cannot be opened for upload.

    Examples:
    - Permission denied
    - Path is a directory
    """

    pass


class LocalFileNotFoundError(FileAccessError):
    """Raised when the local file to upload does not exist."""

    pass


class EncodingError(JiraError):
    """Raised when the multipart/form-data body cannot be built."""

    pass


class TransportError(JiraError):
    """Raised on network-level failure (connection, timeout, broken stream)."""

    pass


class EmptyResponseError(JiraError):
    """Raised when the HTTP layer returned neither a response nor an error."""

    pass


class UnexpectedResponseError(JiraError):
    """Raised when the server answers with a non-success status.

    Carries the HTTP status and any structured error messages the server
    returned (`errorMessages` and `errors` in the Jira error body).
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        messages: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.messages = messages or []
        merged = {"status_code": status_code}
        if self.messages:
            merged["messages"] = self.messages
        merged.update(details or {})
        super().__init__(message, details=merged)


class DecodeError(UnexpectedResponseError):
    """Raised when a success response carries a body that cannot be decoded."""

    pass


class DownloadFailedError(JiraError):
    """Raised when fetching attachment content returns a non-200 status."""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        status = f"{status_code} {reason}".strip()
        super().__init__(
            f"failed to download attachment: {status}",
            details={"status_code": status_code}
        )


def _error_messages(response) -> List[str]:
    """Collect `errorMessages` and `errors` values from a Jira error body."""
    try:
        body = response.json()
    except ValueError:
        return []

    if not isinstance(body, dict):
        return []

    messages = [str(m) for m in body.get("errorMessages") or []]
    errors = body.get("errors") or {}
    if isinstance(errors, dict):
        messages.extend(f"{field}: {msg}" for field, msg in errors.items())
    return messages


def unexpected_response(response) -> UnexpectedResponseError:
    """Convert a non-success HTTP response to an UnexpectedResponseError.

    Args:
        response: requests.Response with an unexpected status code

    Returns:
        UnexpectedResponseError carrying the status and server messages
    """
    messages = _error_messages(response)
    reason = getattr(response, "reason", "") or ""
    summary = f"HTTP {response.status_code} {reason}".rstrip()
    if messages:
        summary = f"{summary}: {'; '.join(messages)}"

    return UnexpectedResponseError(
        f"Unexpected response from server - {summary}",
        status_code=response.status_code,
        messages=messages
    )
