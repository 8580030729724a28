"""Jira Attachment Client

REST client for issue attachments with:
- API generation (v2/v3) resolved once from the installation flavor
- Basic, bearer or mutual-TLS authentication on every request
- Multipart upload, streamed download and delete
- Standardized error handling
"""

import logging
from typing import Any, Callable, Iterable, List, Optional

import requests
from pydantic import ValidationError

from .auth import JiraAuth
from .config import ClientConfig
from .models.attachment import Attachment, Issue
from .utils.errors import (
    DecodeError,
    DownloadFailedError,
    EmptyResponseError,
    TransportError,
    unexpected_response,
)
from .utils.multipart import encode_file

logger = logging.getLogger(__name__)

DOWNLOAD_CHUNK_SIZE = 64 * 1024


class JiraClient:
    """Attachment operations against a Jira server.

    One client is built per process from a ClientConfig. The config and the
    underlying requests.Session are never changed after construction.
    """

    def __init__(self, config: ClientConfig):
        """Initialize Jira client.

        Args:
            config: Connection settings (server, credentials, flavor, timeout)
        """
        self.config = config
        self.paths = config.api_paths

        self.session = requests.Session()
        self.session.auth = JiraAuth(config)
        self.session.verify = config.verify_ssl
        if config.cert:
            self.session.cert = config.cert
        if config.transport is not None:
            self.session.mount("http://", config.transport)
            self.session.mount("https://", config.transport)

        logger.info(
            f"Initialized Jira client for {config.server} "
            f"(API v{self.paths.version}, SSL verify: {config.verify_ssl})"
        )

    def _request(self, method: str, url: str, **kwargs) -> Optional[requests.Response]:
        """Send an authenticated request with the configured timeout.

        Raises:
            TransportError: If no response could be obtained
        """
        kwargs.setdefault('timeout', self.config.timeout)
        logger.debug(f"{method} {url}")

        try:
            return self.session.request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportError(
                f"Request to {url} failed: {e}",
                details={"method": method, "url": url}
            ) from e

    def _url(self, path: str) -> str:
        return f"{self.config.server}{path}"

    @staticmethod
    def _decode(response: requests.Response, parse: Callable[[Any], Any]) -> Any:
        """Decode a success response body, mapping malformed payloads to DecodeError."""
        try:
            return parse(response.json())
        except (ValueError, ValidationError, TypeError) as e:
            raise DecodeError(
                f"Failed to decode response body: {e}",
                status_code=response.status_code
            ) from e

    def get_issue(self, issue_key: str) -> Issue:
        """Fetch an issue with its attachment list.

        Args:
            issue_key: Issue key (e.g., PROJ-1)

        Returns:
            Issue whose attachments keep the tracker's order
        """
        logger.info(f"Fetching attachments of {issue_key}")
        response = self._request(
            'GET',
            self._url(self.paths.issue(issue_key)),
            params={'fields': 'attachment'}
        )
        if response is None:
            raise EmptyResponseError(f"Empty response fetching issue {issue_key}")

        with response:
            if response.status_code != 200:
                raise unexpected_response(response)
            return self._decode(response, Issue.model_validate)

    def upload_attachment(self, issue_key: str, file_path: str) -> List[Attachment]:
        """Upload a file as an attachment to an issue.

        Args:
            issue_key: Issue key (e.g., PROJ-1)
            file_path: Local file to upload

        Returns:
            Created attachments. Usually one, but servers that expand archives
            may return several.

        Raises:
            FileAccessError: If the file cannot be read
            EncodingError: If the multipart body cannot be built
            UnexpectedResponseError: On a non-200 status or undecodable body
        """
        payload = encode_file(file_path)
        headers = {
            'Content-Type': payload.content_type,
            # Bypasses the server's XSRF check for multipart posts
            'X-Atlassian-Token': 'no-check',
        }

        logger.info(f"Uploading {file_path} to {issue_key}")
        response = self._request(
            'POST',
            self._url(self.paths.issue_attachments(issue_key)),
            data=payload.body,
            headers=headers
        )
        if response is None:
            raise EmptyResponseError(f"Empty response uploading {file_path} to {issue_key}")

        with response:
            if response.status_code != 200:
                raise unexpected_response(response)
            attachments = self._decode(
                response,
                lambda body: [Attachment.model_validate(item) for item in body]
            )

        logger.info(f"Uploaded {file_path}: {[a.id for a in attachments]}")
        return attachments

    def upload_attachments(
        self,
        issue_key: str,
        file_paths: Iterable[str],
        on_uploaded: Optional[Callable[[str, List[Attachment]], None]] = None
    ) -> List[Attachment]:
        """Upload several files one after another.

        Stops at the first failure; files after it are not attempted and files
        before it stay uploaded.

        Args:
            issue_key: Issue key (e.g., PROJ-1)
            file_paths: Files to upload, in order
            on_uploaded: Optional callback invoked after each successful file

        Returns:
            All created attachments in upload order
        """
        created: List[Attachment] = []
        for index, file_path in enumerate(file_paths):
            try:
                attachments = self.upload_attachment(issue_key, file_path)
            except Exception as e:
                logger.error(f"Upload aborted at file {index} ({file_path}): {e}")
                raise
            created.extend(attachments)
            if on_uploaded is not None:
                on_uploaded(file_path, attachments)
        return created

    def delete_attachment(self, attachment_id: str) -> None:
        """Delete an attachment by ID.

        Raises:
            UnexpectedResponseError: On any status other than 204 or 200
        """
        logger.info(f"Deleting attachment {attachment_id}")
        response = self._request('DELETE', self._url(self.paths.attachment(attachment_id)))
        if response is None:
            raise EmptyResponseError(f"Empty response deleting attachment {attachment_id}")

        with response:
            if response.status_code not in (200, 204):
                raise unexpected_response(response)

    def download_attachment(self, url: str, dest_path: str) -> int:
        """Stream attachment content from its URL into a local file.

        The destination is only opened after a 200 response, so a failed
        request never creates or truncates it. Refusing to overwrite an
        existing file is up to the caller.

        Args:
            url: The attachment's `content` URL
            dest_path: File to write

        Returns:
            Number of bytes written

        Raises:
            DownloadFailedError: On a non-200 status
            TransportError: If the connection breaks mid-transfer
            OSError: If the destination cannot be created or written
        """
        logger.info(f"Downloading {url} to {dest_path}")
        response = self._request('GET', url, stream=True)
        if response is None:
            raise EmptyResponseError(f"Empty response downloading {url}")

        written = 0
        with response:
            if response.status_code != 200:
                raise DownloadFailedError(response.status_code, response.reason or "")

            with open(dest_path, 'wb') as out:
                try:
                    for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        out.write(chunk)
                        written += len(chunk)
                except requests.exceptions.RequestException as e:
                    logger.error(f"Download of {url} interrupted after {written} bytes: {e}")
                    raise TransportError(
                        f"Download interrupted after {written} bytes: {e}",
                        details={"url": url, "path": dest_path, "bytes_written": written}
                    ) from e

        logger.debug(f"Wrote {written} bytes to {dest_path}")
        return written
