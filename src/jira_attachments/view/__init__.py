"""Jira Attachments Views

Renderers for attachment listings (table, plain, CSV).
"""

__all__ = [
    "render",
]
