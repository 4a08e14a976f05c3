"""Adapters - I/O implementations of ports."""

from .http_api import BackendError, TaskboardAPI

__all__ = [
    "TaskboardAPI",
    "BackendError",
]
