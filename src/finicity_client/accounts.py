"""
Account operations, including the MFA challenge/response exchange

Adding, discovering and refreshing accounts may be answered with HTTP 203
and a set of MFA challenges instead of the accounts. Those calls return an
``OperationResult``: an ``AccountList`` when the call completed, or a
``ChallengeSet`` whose questions must be answered and sent back through the
matching ``*_mfa`` method together with the ``MFA-Session`` value. The
answer may itself be challenged again, so callers loop until they get an
``AccountList`` (see ``resolve_challenges``).
"""
import logging
from typing import Callable, List, Optional, Union

from .exceptions import AccountOperationsError, ChallengeLimitError, ParseError
from .models import (
    Account,
    AccountList,
    AccountLoginForm,
    ChallengeSet,
    LoginForm,
    MfaChallenge,
    MfaQuestion,
    OperationResult,
)
from .operations import BaseOperations
from .rest import MFA_SESSION_HEADER, Response
from .serializer import deserialize

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHALLENGE_ROUNDS = 5

# What a caller may pass back as answers to a challenge
Answers = Union[ChallengeSet, MfaChallenge, List[MfaQuestion]]


def _as_challenge_set(answers: Answers) -> ChallengeSet:
    if isinstance(answers, ChallengeSet):
        return answers
    if isinstance(answers, MfaChallenge):
        return ChallengeSet(challenges=[answers])
    return ChallengeSet(challenges=[MfaChallenge(questions=list(answers))])


def _as_challenge(answers: Answers) -> MfaChallenge:
    if isinstance(answers, MfaChallenge):
        return answers
    if isinstance(answers, ChallengeSet):
        return MfaChallenge(questions=answers.questions)
    return MfaChallenge(questions=list(answers))


class AccountOperations(BaseOperations):
    error_class = AccountOperationsError

    def _account_result(self, response: Response, method: str, path: str) -> OperationResult:
        if response.status_code == 200:
            logger.debug("Parsing account response")
            return deserialize(response.body, AccountList)
        if response.status_code == 203:
            logger.debug("Parsing MFA challenge response")
            return self._challenge_set(response)
        raise AccountOperationsError(f"Unexpected response to {method} {path}",
                                     response.status_code, response.body)

    @staticmethod
    def _challenge_set(response: Response) -> ChallengeSet:
        # The session lives in the response header, not in the XML body
        session = response.headers.get(MFA_SESSION_HEADER)
        if not session:
            raise ParseError(f"MFA challenge response without a {MFA_SESSION_HEADER} header",
                             response.body)
        challenge_set = deserialize(response.body, ChallengeSet)
        challenge_set.attach_session(session)
        return challenge_set

    def _challenged_post(self, path: str, body=None, session: Optional[str] = None) -> OperationResult:
        headers = {MFA_SESSION_HEADER: session} if session else None
        response = self._execute('POST', path, body=body, headers=headers)
        return self._account_result(response, 'POST', path)

    # --- Calls that may be challenged ---------------------------------------

    def add_all_accounts(self, customer_id: str, institution_id: str,
                         login_form: AccountLoginForm) -> OperationResult:
        """Add every account the institution holds for these credentials"""
        path = f"/v1/customers/{customer_id}/institutions/{institution_id}/accounts/addall"
        return self._challenged_post(path, login_form)

    def add_all_accounts_mfa(self, mfa_session: str, customer_id: str, institution_id: str,
                             answers: Answers) -> OperationResult:
        path = f"/v1/customers/{customer_id}/institutions/{institution_id}/accounts/addall/mfa"
        return self._challenged_post(path, _as_challenge_set(answers), mfa_session)

    def discover_accounts(self, customer_id: str, institution_id: str,
                          login_form: AccountLoginForm) -> OperationResult:
        """List the institution's accounts without activating them"""
        path = f"/v1/customers/{customer_id}/institutions/{institution_id}/accounts"
        return self._challenged_post(path, login_form)

    def discover_accounts_mfa(self, mfa_session: str, customer_id: str, institution_id: str,
                              answers: Answers) -> OperationResult:
        path = f"/v1/customers/{customer_id}/institutions/{institution_id}/accounts/mfa"
        return self._challenged_post(path, _as_challenge_set(answers), mfa_session)

    def refresh_account(self, customer_id: str, account_id: str) -> OperationResult:
        path = f"/v1/customers/{customer_id}/accounts/{account_id}"
        return self._challenged_post(path)

    def refresh_account_mfa(self, mfa_session: str, customer_id: str, account_id: str,
                            answers: Answers) -> OperationResult:
        path = f"/v1/customers/{customer_id}/accounts/{account_id}"
        return self._challenged_post(path, _as_challenge(answers), mfa_session)

    # --- Plain calls --------------------------------------------------------

    def activate_accounts(self, customer_id: str, institution_id: str,
                          accounts: AccountList) -> AccountList:
        path = f"/v2/customers/{customer_id}/institutions/{institution_id}/accounts"
        response = self._execute('PUT', path, body=accounts)
        self._expect(response, 200, 'PUT', path)
        return deserialize(response.body, AccountList)

    def refresh_accounts(self, customer_id: str) -> AccountList:
        path = f"/v1/customers/{customer_id}/accounts"
        response = self._execute('POST', path)
        self._expect(response, 200, 'POST', path)
        return deserialize(response.body, AccountList)

    def get_accounts(self, customer_id: str, institution_id: Optional[str] = None) -> AccountList:
        if institution_id is None:
            path = f"/v1/customers/{customer_id}/accounts"
        else:
            path = f"/v1/customers/{customer_id}/institutions/{institution_id}/accounts"
        return self._get(path, AccountList)

    def get_account(self, customer_id: str, account_id: str) -> Account:
        return self._get(f"/v1/customers/{customer_id}/accounts/{account_id}", Account)

    def modify_account(self, customer_id: str, account_id: str, account: Account) -> None:
        self._update(f"/v1/customers/{customer_id}/accounts/{account_id}", account)

    def delete_account(self, customer_id: str, account_id: str) -> None:
        self._delete(f"/v1/customers/{customer_id}/accounts/{account_id}")

    def get_account_login_form(self, customer_id: str, account_id: str) -> LoginForm:
        return self._get(f"/v1/customers/{customer_id}/accounts/{account_id}/loginForm", LoginForm)

    def modify_account_credentials(self, customer_id: str, account_id: str,
                                   login_form: LoginForm) -> None:
        self._update(f"/v1/customers/{customer_id}/accounts/{account_id}/loginForm", login_form)


def resolve_challenges(result: OperationResult,
                       answer: Callable[[ChallengeSet], None],
                       resubmit: Callable[[ChallengeSet], OperationResult],
                       max_rounds: int = DEFAULT_MAX_CHALLENGE_ROUNDS) -> AccountList:
    """Answer challenges until the accounts come back.

    ``answer`` fills in ``MfaQuestion.answer`` on each question;
    ``resubmit`` sends the answered set to the matching ``*_mfa`` call, e.g.
    ``lambda c: ops.add_all_accounts_mfa(c.session, customer_id, institution_id, c)``.
    Raises ChallengeLimitError after ``max_rounds`` answered rounds.
    """
    rounds = 0
    while isinstance(result, ChallengeSet):
        if rounds >= max_rounds:
            raise ChallengeLimitError(rounds, result)
        answer(result)
        result = resubmit(result)
        rounds += 1
        logger.debug(f"MFA round {rounds} answered, got {type(result).__name__}")
    return result
