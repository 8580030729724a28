"""Jira Attachment Data Model

Pydantic models for attachment metadata as returned by the Jira REST API,
both from an upload response and embedded in an issue's `attachment` field.
"""

from typing import Optional, List
from pydantic import BaseModel, Field, field_validator


class User(BaseModel):
    """Attachment author. Cloud sends accountId, self-hosted sends name."""

    displayName: str = Field(default="", description="Display name")
    accountId: Optional[str] = Field(default=None, description="Account ID (cloud)")
    name: Optional[str] = Field(default=None, description="Username (local)")

    @property
    def identifier(self) -> Optional[str]:
        return self.accountId or self.name

    class Config:
        frozen = True


class Attachment(BaseModel):
    """Immutable snapshot of a file attached to an issue."""

    id: str = Field(description="Unique attachment ID")
    filename: str = Field(description="Display file name (not unique)")
    author: User = Field(default_factory=User, description="Uploader")
    created: str = Field(
        default="",
        description="Upload timestamp in the tracker's format, e.g. 2020-12-01T10:00:00.000+0100"
    )
    size: int = Field(default=0, description="File size in bytes")
    mimeType: Optional[str] = Field(default=None, description="MIME type of file")
    content: str = Field(description="Absolute URL of the file content")

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        """Jira sends string IDs, but accept numeric ones too."""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator('filename', 'content')
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator('size')
    @classmethod
    def validate_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Attachment size cannot be negative: {v}")
        return v

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "10001",
                "filename": "document.pdf",
                "author": {"displayName": "John Doe", "accountId": "123"},
                "created": "2020-12-01T10:00:00.000+0100",
                "size": 1048576,
                "mimeType": "application/pdf",
                "content": "https://example.atlassian.net/rest/api/3/attachment/content/10001"
            }
        }


class IssueFields(BaseModel):
    """The subset of issue fields this client requests."""

    attachment: List[Attachment] = Field(default_factory=list)


class Issue(BaseModel):
    """Jira issue reduced to its key and attachments."""

    key: str = Field(description="Issue key, e.g. PROJ-1")
    fields: IssueFields = Field(default_factory=IssueFields)

    @property
    def attachments(self) -> List[Attachment]:
        """Attachments in the order the tracker returned them."""
        return self.fields.attachment
