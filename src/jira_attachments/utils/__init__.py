"""Jira Attachments Utilities

This package contains utility modules for the attachment client.
"""

__all__ = [
    "errors",
    "multipart",
]
