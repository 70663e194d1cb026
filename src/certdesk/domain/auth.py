"""Authentication session for the admin console."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from certdesk.domain.errors import INVALID_CREDENTIALS, MISSING_CREDENTIALS

logger = logging.getLogger(__name__)

# Demo account; there is no server-side authentication
DEMO_EMAIL = "admin@gmail.com"
DEMO_PASSWORD = "123456"


def check_credentials(email: str, password: str) -> bool:
    """Check an email/password pair against the demo account."""
    return email == DEMO_EMAIL and password == DEMO_PASSWORD


@dataclass
class AuthSession:
    """Login state for one user of the console.

    Set by a successful login, cleared by logout, checked before any
    record command runs.
    """

    authenticated: bool = False
    email: Optional[str] = None

    def login(self, email: str, password: str) -> Optional[str]:
        """Attempt to log in.

        Returns:
            None on success, otherwise the error message to show. A failed
            attempt leaves the session unauthenticated.
        """
        if not email or not password:
            return MISSING_CREDENTIALS
        if not check_credentials(email, password):
            logger.info("Rejected login for %s", email)
            self.logout()
            return INVALID_CREDENTIALS
        self.authenticated = True
        self.email = email
        return None

    def logout(self) -> None:
        """Clear the session."""
        self.authenticated = False
        self.email = None


class SessionStore:
    """Persists an AuthSession between command invocations."""

    def __init__(self, path: Optional[str] = None):
        """Initialize session store.

        Args:
            path: Session file path. If None, checks CERTDESK_SESSION_PATH
                environment variable, then defaults to ~/.certdesk/session.json
        """
        if path is None:
            path = os.environ.get("CERTDESK_SESSION_PATH")
        if path is None:
            path = str(Path.home() / ".certdesk" / "session.json")
        self.path = Path(path)

    def load(self) -> AuthSession:
        """Load the stored session, or an unauthenticated one."""
        if not self.path.exists():
            return AuthSession()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return AuthSession()
        if not isinstance(data, dict):
            return AuthSession()
        return AuthSession(
            authenticated=data.get("authenticated") is True,
            email=data.get("email"),
        )

    def save(self, session: AuthSession) -> None:
        """Store a session; an unauthenticated session removes the file."""
        if not session.authenticated:
            self.clear()
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"authenticated": True, "email": session.email}
        self.path.write_text(json.dumps(payload), encoding="utf-8")

    def clear(self) -> None:
        """Remove the stored session."""
        if self.path.exists():
            self.path.unlink()
