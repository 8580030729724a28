"""Jira Attachments

Attach, list, download and remove Jira issue attachments over the REST API
(v2 for self-hosted installations, v3 for cloud).
"""

__version__ = "0.1.0"
