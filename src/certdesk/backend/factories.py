"""Backend factory functions for creating record backend instances."""

import os
from typing import Optional

from certdesk.backend.http_service import DEFAULT_TIMEOUT, HTTPRecordBackend
from certdesk.backend.sqlalchemy_service import SQLAlchemyRecordBackend

DEFAULT_API_URL = "http://localhost:1001"


def create_http_backend(
    api_url: Optional[str] = None,
    timeout: Optional[float] = None,
    max_retries: Optional[int] = None,
) -> HTTPRecordBackend:
    """Create a backend for the remote REST service.

    Args:
        api_url: Service root URL. If None, checks CERTDESK_API_URL environment
            variable, then defaults to http://localhost:1001
        timeout: Request timeout in seconds. If None, checks CERTDESK_TIMEOUT,
            then defaults to 30
        max_retries: Retries for failed reads. If None, checks CERTDESK_RETRIES,
            then defaults to 0

    Returns:
        HTTPRecordBackend instance
    """
    if api_url is None:
        api_url = os.environ.get("CERTDESK_API_URL", DEFAULT_API_URL)

    if timeout is None:
        env_timeout = os.environ.get("CERTDESK_TIMEOUT")
        timeout = float(env_timeout) if env_timeout else DEFAULT_TIMEOUT

    if max_retries is None:
        env_retries = os.environ.get("CERTDESK_RETRIES")
        max_retries = int(env_retries) if env_retries else 0

    return HTTPRecordBackend(api_url, timeout=timeout, max_retries=max_retries)


def create_local_backend(database_path: Optional[str] = None) -> SQLAlchemyRecordBackend:
    """Create a local SQLite-backed record store.

    Args:
        database_path: Path to SQLite database file. If None, checks
            CERTDESK_LOCAL_DB environment variable, then defaults to an
            in-memory database. ':memory:' also selects in-memory.

    Returns:
        SQLAlchemyRecordBackend instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("CERTDESK_LOCAL_DB")

    if database_path is None or database_path == ":memory:":
        return SQLAlchemyRecordBackend("sqlite://")

    return SQLAlchemyRecordBackend(f"sqlite:///{database_path}")
