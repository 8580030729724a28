"""Shared test fixtures and canned Jira responses."""
