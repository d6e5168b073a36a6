"""
Finicity API Client Package
"""
from .client import FinicityClient
from .accounts import AccountOperations, resolve_challenges
from .config import Config, ConfigurationError, get_config
from .exceptions import (
    AccountOperationsError,
    AuthenticationError,
    ChallengeLimitError,
    CustomerOperationsError,
    FinicityError,
    InstitutionOperationsError,
    OperationError,
    ParseError,
    PartnerOperationsError,
    TransactionOperationsError,
    TransportError,
    TxPushOperationsError,
)
from .models import (
    Account,
    AccountList,
    AccountLoginForm,
    ChallengeSet,
    Credentials,
    Customer,
    LoginForm,
    MfaChallenge,
    MfaQuestion,
    OperationResult,
    Subscription,
    Token,
    Transaction,
)
from .token_manager import TokenGuard

__all__ = [
    'FinicityClient', 'AccountOperations', 'resolve_challenges', 'TokenGuard',
    'Config', 'ConfigurationError', 'get_config',
    'FinicityError', 'AuthenticationError', 'TransportError', 'OperationError', 'ParseError',
    'AccountOperationsError', 'CustomerOperationsError', 'InstitutionOperationsError',
    'TransactionOperationsError', 'TxPushOperationsError', 'PartnerOperationsError',
    'ChallengeLimitError',
    'Account', 'AccountList', 'AccountLoginForm', 'ChallengeSet', 'Credentials', 'Customer',
    'LoginForm', 'MfaChallenge', 'MfaQuestion', 'OperationResult', 'Subscription', 'Token',
    'Transaction',
]
