"""HTTP implementation of the record backend.

Talks to the remote REST service:

- ``GET /users``, ``GET /users/{id}``, ``POST /users``, ``PUT /users/{id}``,
  ``DELETE /users/{id}`` for student records
- ``GET /calls`` for certificate verification records
"""

import logging
from typing import Any, Callable, Optional, TypeVar

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from certdesk.backend.base import RecordBackend
from certdesk.backend.mappers import (
    certificate_page_from_json,
    student_from_json,
    student_to_payload,
)
from certdesk.domain.entities import CertificatePage, Student
from certdesk.domain.errors import RemoteServiceError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

T = TypeVar("T")


class HTTPRecordBackend(RecordBackend):
    """requests-based implementation of RecordBackend."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 0,
    ):
        """Initialize HTTP backend.

        Args:
            base_url: Service root, e.g. 'http://localhost:1001'
            timeout: Per-request timeout in seconds
            max_retries: Retries for idempotent reads (GET only)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Content-Type": "application/json"})
            if self.max_retries > 0:
                retry = Retry(
                    total=self.max_retries,
                    backoff_factor=0.5,
                    status_forcelist=[502, 503, 504],
                    allowed_methods=["GET"],
                )
                adapter = HTTPAdapter(max_retries=retry)
                self._session.mount("http://", adapter)
                self._session.mount("https://", adapter)
        return self._session

    def connect(self) -> None:
        """Connect to the service."""
        # Session is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def _request(
        self, method: str, path: str, json_body: Optional[dict[str, Any]] = None
    ) -> Any:
        """Send a request and decode the JSON response.

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            RemoteServiceError: On transport failure, non-2xx status or bad JSON
        """
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(
                method, url, json=json_body, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise RemoteServiceError(f"{method} {path} failed with status {status}") from e
        except requests.RequestException as e:
            raise RemoteServiceError(f"{method} {path} failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteServiceError(f"{method} {path} returned invalid JSON") from e

    def _expect_object(self, body: Any, path: str) -> dict[str, Any]:
        if not isinstance(body, dict):
            raise RemoteServiceError(f"Unexpected response from {path}")
        return body

    def _map(self, mapper: Callable[[Any], T], body: Any, path: str) -> T:
        """Apply a mapper, reporting a malformed body as a service error."""
        try:
            return mapper(body)
        except (AttributeError, TypeError, ValueError) as e:
            raise RemoteServiceError(f"Unexpected response from {path}") from e

    # Student operations
    def list_students(self) -> list[Student]:
        """List all students."""
        body = self._request("GET", "/users")
        if not isinstance(body, list) or not all(isinstance(item, dict) for item in body):
            raise RemoteServiceError("Unexpected response from /users")
        return [self._map(student_from_json, item, "/users") for item in body]

    def get_student(self, student_id: str) -> Optional[Student]:
        """Get student by ID."""
        try:
            body = self._request("GET", f"/users/{student_id}")
        except RemoteServiceError as e:
            cause = e.__cause__
            if isinstance(cause, requests.HTTPError) and cause.response is not None:
                if cause.response.status_code == 404:
                    return None
            raise
        if body is None:
            return None
        return student_from_json(self._expect_object(body, "/users"))

    def create_student(self, values: dict[str, str]) -> Student:
        """Create a student. Returns the stored record with its assigned ID."""
        body = self._request("POST", "/users", student_to_payload(values))
        return student_from_json(self._expect_object(body, "/users"))

    def update_student(self, student_id: str, values: dict[str, str]) -> Student:
        """Update some fields of a student. Returns the updated record."""
        body = self._request("PUT", f"/users/{student_id}", student_to_payload(values))
        return student_from_json(self._expect_object(body, "/users"))

    def delete_student(self, student_id: str) -> None:
        """Delete a student."""
        self._request("DELETE", f"/users/{student_id}")

    # Certificate operations
    def list_certificates(self) -> CertificatePage:
        """List certificate verification records."""
        body = self._expect_object(self._request("GET", "/calls"), "/calls")
        return self._map(certificate_page_from_json, body, "/calls")
