"""Tiny Tasks: optimistic task-list client for a remote HTTP/JSON store."""

__version__ = "0.1.0"
