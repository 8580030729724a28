"""Jira Attachments Data Models

This package contains Pydantic models for Jira attachment metadata.
"""

from .attachment import Attachment, Issue, IssueFields, User

__all__ = [
    "Attachment",
    "Issue",
    "IssueFields",
    "User",
]
