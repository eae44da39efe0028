"""Conversational Jira assistant: duplicate-aware issue creation."""

__version__ = "1.0.0"
