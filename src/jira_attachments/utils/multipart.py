"""Multipart Upload Encoding

Builds the in-memory multipart/form-data body Jira expects for attachment
uploads: a single part named ``file`` holding the file's exact bytes.
"""

import os
import logging
from typing import NamedTuple

from urllib3.filepost import encode_multipart_formdata

from .errors import EncodingError, FileAccessError, LocalFileNotFoundError

logger = logging.getLogger(__name__)

FORM_FIELD = "file"


class MultipartPayload(NamedTuple):
    """Encoded request body and its Content-Type (boundary included)."""

    body: bytes
    content_type: str


def read_file(file_path: str) -> bytes:
    """Read a local file in full.

    Raises:
        LocalFileNotFoundError: If the path does not exist
        FileAccessError: If the path cannot be opened or read
    """
    try:
        with open(file_path, "rb") as fh:
            return fh.read()
    except FileNotFoundError as e:
        raise LocalFileNotFoundError(
            f"File {file_path!r} does not exist",
            details={"path": file_path}
        ) from e
    except OSError as e:
        raise FileAccessError(
            f"Cannot read file {file_path!r}: {e.strerror or e}",
            details={"path": file_path}
        ) from e


def encode_file(file_path: str) -> MultipartPayload:
    """Encode a local file as a single-part multipart/form-data body.

    Args:
        file_path: Path of the file to upload

    Returns:
        MultipartPayload with the body bytes and the matching Content-Type

    Raises:
        LocalFileNotFoundError: If the file does not exist
        FileAccessError: If the file cannot be read
        EncodingError: If the multipart structure cannot be written
    """
    filename = os.path.basename(file_path)
    content = read_file(file_path)

    try:
        body, content_type = encode_multipart_formdata(
            {FORM_FIELD: (filename, content)}
        )
    except (MemoryError, TypeError, ValueError) as e:
        raise EncodingError(
            f"Failed to build multipart body for {filename!r}: {e}",
            details={"path": file_path}
        ) from e

    logger.debug(f"Encoded {filename} ({len(content)} bytes) into {len(body)}-byte multipart body")
    return MultipartPayload(body=body, content_type=content_type)
