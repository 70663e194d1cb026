"""Record backend layer for certdesk application."""

from certdesk.backend.base import RecordBackend
from certdesk.backend.factories import create_http_backend, create_local_backend

__all__ = ["RecordBackend", "create_http_backend", "create_local_backend"]
