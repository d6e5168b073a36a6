"""
Finicity API client

One FinicityClient per set of partner credentials. It authenticates when it
is built and hands out operations clients that all share its token.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

import requests

from .accounts import AccountOperations
from .auth import Authenticator, PartnerOperations
from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TOKEN_LIFETIME_MINUTES,
    Config,
    get_config,
)
from .customers import CustomerOperations
from .exceptions import AuthenticationError
from .institutions import InstitutionOperations
from .models import Credentials, Token
from .rest import RestClient
from .token_manager import TokenGuard
from .transactions import TransactionOperations
from .tx_push import TxPushOperations

logger = logging.getLogger(__name__)


class FinicityClient:
    def __init__(self, credentials: Credentials, base_url: str = DEFAULT_BASE_URL,
                 token_lifetime: timedelta = timedelta(minutes=DEFAULT_TOKEN_LIFETIME_MINUTES),
                 timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 session: Optional[requests.Session] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        """Build the client and authenticate.

        Raises AuthenticationError if the first authentication fails.
        """
        self.credentials = credentials
        self.rest_client = RestClient(credentials.app_key, base_url, timeout, session)
        self.authenticator = Authenticator(self.rest_client, credentials, token_lifetime, clock)
        self.token_guard = TokenGuard(self.authenticator)

        self._partner_operations = PartnerOperations(self.rest_client, self.token_guard, credentials)
        self._account_operations = AccountOperations(self.rest_client, self.token_guard)
        self._customer_operations = CustomerOperations(self.rest_client, self.token_guard)
        self._institution_operations = InstitutionOperations(self.rest_client, self.token_guard)
        self._transaction_operations = TransactionOperations(self.rest_client, self.token_guard)
        self._tx_push_operations = TxPushOperations(self.rest_client, self.token_guard)

        try:
            self.token_guard.force_refresh()
        except AuthenticationError:
            if session is None:
                self.rest_client.close()
            raise
        logger.debug(f"FinicityClient ready for partner {credentials.partner_id}")

    @classmethod
    def from_config(cls, config: Optional[Config] = None, suffix: str = "", **kwargs) -> 'FinicityClient':
        """Build a client from FINICITY_* environment settings"""
        config = config or get_config(suffix)
        return cls(
            config.credentials(),
            base_url=config.base_url,
            token_lifetime=config.token_lifetime,
            timeout=config.timeout,
            **kwargs,
        )

    def refresh_token(self) -> Token:
        """Authenticate now; on failure the previous token is kept"""
        return self.token_guard.force_refresh()

    # Each accessor makes sure the shared token is fresh before handing out a client

    def get_partner_operations(self) -> PartnerOperations:
        self.token_guard.current()
        return self._partner_operations

    def get_account_operations(self) -> AccountOperations:
        self.token_guard.current()
        return self._account_operations

    def get_customer_operations(self) -> CustomerOperations:
        self.token_guard.current()
        return self._customer_operations

    def get_institution_operations(self) -> InstitutionOperations:
        self.token_guard.current()
        return self._institution_operations

    def get_transaction_operations(self) -> TransactionOperations:
        self.token_guard.current()
        return self._transaction_operations

    def get_tx_push_operations(self) -> TxPushOperations:
        self.token_guard.current()
        return self._tx_push_operations

    def close(self):
        self.rest_client.close()

    def __enter__(self) -> 'FinicityClient':
        return self

    def __exit__(self, *args):
        self.close()
