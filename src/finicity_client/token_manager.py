"""
Shared access-token holder

Every operations client holds the same TokenGuard, so a refresh made on any
call path is seen by all of them.
"""
import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from .models import Token

logger = logging.getLogger(__name__)


class TokenGuard:
    """Holds the current token and refreshes it once it is stale.

    Refreshes are single-flight: callers that find the token stale while
    another thread is refreshing wait for that refresh and receive its token.
    """

    def __init__(self, authenticator, clock: Optional[Callable[[], datetime]] = None):
        self.authenticator = authenticator
        self.clock = clock or authenticator.clock
        self._token: Optional[Token] = None
        self._lock = threading.Lock()

    @property
    def token(self) -> Optional[Token]:
        return self._token

    def _stale(self, token: Optional[Token]) -> bool:
        return token is None or token.is_expired(self.clock())

    def is_stale(self) -> bool:
        return self._stale(self._token)

    def current(self) -> Token:
        """Return the current token, refreshing it first if it has expired"""
        token = self._token
        if not self._stale(token):
            return token

        with self._lock:
            # Re-check: another caller may have refreshed while we waited
            token = self._token
            if self._stale(token):
                token = self._refresh()
            return token

    def force_refresh(self) -> Token:
        """Authenticate now regardless of the current token's age"""
        with self._lock:
            return self._refresh()

    def _refresh(self) -> Token:
        # On failure the previous token stays in place
        logger.info("Requesting a new access token")
        token = self.authenticator.authenticate()
        self._token = token
        logger.info(f"Access token refreshed, valid until {token.expires_at.isoformat()}")
        return token
