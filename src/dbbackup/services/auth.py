"""Shared-secret gate for backup runs."""

import hmac
from typing import Optional

from dbbackup.errors import AuthenticationError
from dbbackup.messages import MessageCatalog


class AuthGate:
    """Compares a caller-supplied credential with the configured secret."""

    def __init__(self, expected: str, catalog: Optional[MessageCatalog] = None):
        self._expected = expected.encode("utf-8")
        self.catalog = catalog or MessageCatalog()
        self.authenticated = False

    def authenticate(self, candidate: Optional[str]):
        supplied = (candidate or "").encode("utf-8")
        if candidate is None or not hmac.compare_digest(supplied, self._expected):
            self.authenticated = False
            raise AuthenticationError(self.catalog.format("error_incorrect_password"))
        self.authenticated = True
