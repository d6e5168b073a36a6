"""
Error types raised by the Finicity client
"""
from typing import Optional


class FinicityError(Exception):
    """Base class for all client errors"""
    pass


class _ResponseError(FinicityError):
    """Error that carries the HTTP status and raw body of the response"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is None:
            return message
        return f"{message} ({self.status_code}): {self.body}"


class AuthenticationError(_ResponseError):
    """Partner authentication failed or returned an unexpected status"""
    pass


class TransportError(FinicityError):
    """Network or protocol failure before a response was received"""
    pass


class OperationError(_ResponseError):
    """A resource call returned an unexpected status code"""
    pass


class AccountOperationsError(OperationError):
    pass


class CustomerOperationsError(OperationError):
    pass


class InstitutionOperationsError(OperationError):
    pass


class TransactionOperationsError(OperationError):
    pass


class TxPushOperationsError(OperationError):
    pass


class PartnerOperationsError(OperationError):
    pass


class ParseError(FinicityError):
    """A response body could not be read into the expected type"""

    def __init__(self, message: str, body: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.body = body
        self.cause = cause


class ChallengeLimitError(FinicityError):
    """MFA challenges kept coming after the caller's round limit"""

    def __init__(self, rounds: int, challenge):
        super().__init__(f"Still challenged after {rounds} rounds of MFA answers")
        self.rounds = rounds
        self.challenge = challenge
