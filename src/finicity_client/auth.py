"""
Finicity partner authentication

Exchanges the long-lived partner credentials for a short-lived access token.
Finicity tokens live for two hours on the server; the client treats them as
expired after ``token_lifetime`` (90 minutes by default) so that a refresh
happens before the API would reject the token.

Usage:
    from finicity_client import FinicityClient

    client = FinicityClient.from_config()
    client.refresh_token()
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .config import DEFAULT_TOKEN_LIFETIME_MINUTES
from .exceptions import (
    AuthenticationError,
    ParseError,
    PartnerOperationsError,
    TransportError,
)
from .models import Credentials, PartnerAccess, PartnerCredentials, Token
from .operations import BaseOperations
from .rest import RestClient
from .serializer import deserialize

logger = logging.getLogger(__name__)

AUTHENTICATION_PATH = '/v2/partners/authentication'


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Authenticator:
    """Obtains access tokens with the partner credentials"""

    def __init__(self, rest_client: RestClient, credentials: Credentials,
                 token_lifetime: timedelta = timedelta(minutes=DEFAULT_TOKEN_LIFETIME_MINUTES),
                 clock: Optional[Callable[[], datetime]] = None):
        self.rest_client = rest_client
        self.credentials = credentials
        self.token_lifetime = token_lifetime
        self.clock = clock or utcnow

    def authenticate(self) -> Token:
        """Make one authentication call and return the new token.

        Raises AuthenticationError for transport failures, any status other
        than 200, and bodies without a token. Never retries.
        """
        body = PartnerCredentials(
            partner_id=self.credentials.partner_id,
            partner_secret=self.credentials.partner_secret,
        )

        try:
            response = self.rest_client.execute('POST', AUTHENTICATION_PATH, body=body)
        except TransportError as e:
            logger.error(f"Partner authentication failed: {e}")
            raise AuthenticationError(f"Partner authentication failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Partner authentication rejected with status {response.status_code}")
            raise AuthenticationError("Partner authentication rejected",
                                      response.status_code, response.body)

        try:
            access = deserialize(response.body, PartnerAccess)
        except ParseError as e:
            raise AuthenticationError("Unreadable partner authentication response",
                                      response.status_code, response.body) from e
        if not access.token:
            raise AuthenticationError("Partner authentication response has no token",
                                      response.status_code, response.body)

        issued_at = self.clock()
        return Token(value=access.token, expires_at=issued_at + self.token_lifetime)


class PartnerOperations(BaseOperations):
    """Partner-level calls made with the current access token"""
    error_class = PartnerOperationsError

    def __init__(self, rest_client, token_guard, credentials: Credentials):
        super().__init__(rest_client, token_guard)
        self.credentials = credentials

    def authentication(self) -> Token:
        """Authenticate again and share the new token with every client"""
        return self.token_guard.force_refresh()

    def modify_partner_secret(self, new_partner_secret: str) -> None:
        """Replace the partner secret.

        The running client keeps the credentials it was built with; build a
        new client with the new secret for future authentications.
        """
        body = PartnerCredentials(
            partner_id=self.credentials.partner_id,
            partner_secret=self.credentials.partner_secret,
            new_partner_secret=new_partner_secret,
        )
        self._update(AUTHENTICATION_PATH, body)
        logger.info("Partner secret changed")
