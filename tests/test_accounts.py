import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock

sys.path.insert(0, str(Path(__file__).resolve().parent))

from fixtures import ACCOUNTS_XML, CHALLENGE_XML, create_rest_client, create_token, create_token_guard

from finicity_client.accounts import AccountOperations, resolve_challenges
from finicity_client.exceptions import (
    AccountOperationsError,
    ChallengeLimitError,
    ParseError,
    TransportError,
)
from finicity_client.models import (
    AccountList,
    AccountLoginForm,
    ChallengeSet,
    LoginField,
    MfaChallenge,
    MfaQuestion,
)
from finicity_client.rest import Response

CUSTOMER_ID = "41442"
INSTITUTION_ID = "101732"
ACCOUNT_ID = "2083"

TWO_CHALLENGES_XML = """<accounts>
  <mfaChallenges>
    <questions>
      <question><text>First?</text></question>
      <question><text>Second?</text></question>
    </questions>
  </mfaChallenges>
  <mfaChallenges>
    <questions>
      <question><text>Third?</text></question>
    </questions>
  </mfaChallenges>
</accounts>"""


def create_login_form() -> AccountLoginForm:
    return AccountLoginForm(credentials=[
        LoginField(id="101732001", name="Banking Userid", value="tfa_text"),
        LoginField(id="101732002", name="Banking Password", value="go"),
    ])


def answered(challenge_set: ChallengeSet, answer: str = "success") -> ChallengeSet:
    for question in challenge_set.questions:
        question.answer = answer
    return challenge_set


class TestAccountResult(unittest.TestCase):
    """Status handling shared by the calls that may be challenged"""

    def setUp(self):
        self.guard = create_token_guard()

    def _add_all(self, rest_client):
        operations = AccountOperations(rest_client, self.guard)
        return operations.add_all_accounts(CUSTOMER_ID, INSTITUTION_ID, create_login_form())

    def test_200_returns_accounts(self):
        result = self._add_all(create_rest_client(200, ACCOUNTS_XML))

        self.assertIsInstance(result, AccountList)
        self.assertEqual(result[0].id, ACCOUNT_ID)

    def test_203_returns_challenges_with_session(self):
        result = self._add_all(create_rest_client(203, CHALLENGE_XML, {"MFA-Session": "ABC123"}))

        self.assertIsInstance(result, ChallengeSet)
        self.assertEqual(result.session, "ABC123")
        self.assertEqual(len(result.questions), 1)
        self.assertEqual(result.questions[0].text, "Q")
        self.assertEqual(result.questions[0].session, "ABC123")
        self.assertEqual(result.challenges[0].session, "ABC123")

    def test_session_header_is_case_insensitive(self):
        result = self._add_all(create_rest_client(203, CHALLENGE_XML, {"mfa-session": "abc"}))

        self.assertEqual(result.session, "abc")

    def test_every_challenge_gets_the_session(self):
        result = self._add_all(create_rest_client(203, TWO_CHALLENGES_XML, {"MFA-Session": "S"}))

        self.assertEqual(len(result.challenges), 2)
        self.assertEqual(len(result.questions), 3)
        self.assertTrue(all(c.session == "S" for c in result.challenges))
        self.assertTrue(all(q.session == "S" for q in result.questions))

    def test_203_without_session_header(self):
        with self.assertRaises(ParseError):
            self._add_all(create_rest_client(203, CHALLENGE_XML))

    def test_malformed_accounts_body(self):
        with self.assertRaises(ParseError):
            self._add_all(create_rest_client(200, "<accounts>"))

    def test_unexpected_statuses(self):
        for status, body in [(201, ACCOUNTS_XML), (204, ""), (400, "<error/>"), (500, "oops")]:
            with self.subTest(status=status):
                with self.assertRaises(AccountOperationsError) as context:
                    self._add_all(create_rest_client(status, body))

                self.assertEqual(context.exception.status_code, status)
                self.assertEqual(context.exception.body, body)

    def test_transport_error_is_wrapped(self):
        rest_client = MagicMock()
        rest_client.execute.side_effect = TransportError("timed out")

        with self.assertRaises(AccountOperationsError) as context:
            self._add_all(rest_client)

        self.assertIsInstance(context.exception.__cause__, TransportError)
        self.assertIsNone(context.exception.status_code)


class TestChallengedCalls(unittest.TestCase):
    def setUp(self):
        self.guard = create_token_guard(create_token("TOKEN"))
        self.rest_client = create_rest_client(200, ACCOUNTS_XML)
        self.operations = AccountOperations(self.rest_client, self.guard)

    def _sent(self):
        args, kwargs = self.rest_client.execute.call_args
        return args, kwargs

    def _challenge(self) -> ChallengeSet:
        challenge_set = ChallengeSet(challenges=[MfaChallenge(questions=[MfaQuestion(text="Q")])])
        challenge_set.attach_session("SESSION1")
        return answered(challenge_set)

    def test_add_all_accounts(self):
        login_form = create_login_form()

        self.operations.add_all_accounts(CUSTOMER_ID, INSTITUTION_ID, login_form)

        args, kwargs = self._sent()
        self.assertEqual(args, ("POST", "/v1/customers/41442/institutions/101732/accounts/addall"))
        self.assertIs(kwargs["body"], login_form)
        self.assertIsNone(kwargs["headers"])
        self.assertEqual(kwargs["token"], "TOKEN")

    def test_add_all_accounts_mfa(self):
        challenge_set = self._challenge()

        self.operations.add_all_accounts_mfa("SESSION1", CUSTOMER_ID, INSTITUTION_ID, challenge_set)

        args, kwargs = self._sent()
        self.assertEqual(args, ("POST", "/v1/customers/41442/institutions/101732/accounts/addall/mfa"))
        self.assertEqual(kwargs["headers"], {"MFA-Session": "SESSION1"})
        self.assertIs(kwargs["body"], challenge_set)

    def test_discover_accounts(self):
        self.operations.discover_accounts(CUSTOMER_ID, INSTITUTION_ID, create_login_form())

        args, kwargs = self._sent()
        self.assertEqual(args, ("POST", "/v1/customers/41442/institutions/101732/accounts"))
        self.assertIsNone(kwargs["headers"])

    def test_discover_accounts_mfa_accepts_question_list(self):
        questions = [MfaQuestion(text="Q", answer="success")]

        self.operations.discover_accounts_mfa("SESSION2", CUSTOMER_ID, INSTITUTION_ID, questions)

        args, kwargs = self._sent()
        self.assertEqual(args, ("POST", "/v1/customers/41442/institutions/101732/accounts/mfa"))
        self.assertEqual(kwargs["headers"], {"MFA-Session": "SESSION2"})
        self.assertIsInstance(kwargs["body"], ChallengeSet)
        self.assertEqual(kwargs["body"].questions, questions)

    def test_refresh_account(self):
        self.operations.refresh_account(CUSTOMER_ID, ACCOUNT_ID)

        args, kwargs = self._sent()
        self.assertEqual(args, ("POST", "/v1/customers/41442/accounts/2083"))
        self.assertIsNone(kwargs["body"])

    def test_refresh_account_mfa_sends_single_challenge(self):
        self.operations.refresh_account_mfa("SESSION3", CUSTOMER_ID, ACCOUNT_ID, self._challenge())

        args, kwargs = self._sent()
        self.assertEqual(args, ("POST", "/v1/customers/41442/accounts/2083"))
        self.assertEqual(kwargs["headers"], {"MFA-Session": "SESSION3"})
        self.assertIsInstance(kwargs["body"], MfaChallenge)
        self.assertEqual(kwargs["body"].questions[0].answer, "success")

    def test_follow_up_may_be_challenged_again(self):
        self.rest_client.execute.return_value = Response(203, CHALLENGE_XML, {"MFA-Session": "SESSION2"})

        result = self.operations.add_all_accounts_mfa("SESSION1", CUSTOMER_ID, INSTITUTION_ID,
                                                      self._challenge())

        self.assertIsInstance(result, ChallengeSet)
        self.assertEqual(result.session, "SESSION2")

    def test_consumed_session_is_rejected(self):
        self.rest_client.execute.return_value = Response(400, "<error><code>103</code></error>")

        with self.assertRaises(AccountOperationsError) as context:
            self.operations.add_all_accounts_mfa("USED", CUSTOMER_ID, INSTITUTION_ID, self._challenge())

        self.assertEqual(context.exception.status_code, 400)


class TestPlainAccountCalls(unittest.TestCase):
    def setUp(self):
        self.guard = create_token_guard()

    def _operations(self, status, body=""):
        self.rest_client = create_rest_client(status, body)
        return AccountOperations(self.rest_client, self.guard)

    def test_get_accounts(self):
        accounts = self._operations(200, ACCOUNTS_XML).get_accounts(CUSTOMER_ID)

        self.assertEqual(len(accounts), 1)
        args, _ = self.rest_client.execute.call_args
        self.assertEqual(args, ("GET", "/v1/customers/41442/accounts"))

    def test_get_accounts_error_body(self):
        operations = self._operations(200, "<error><code>38</code><message>Invalid request</message></error>")

        with self.assertRaises(ParseError):
            operations.get_accounts(CUSTOMER_ID)

    def test_get_accounts_for_institution(self):
        self._operations(200, ACCOUNTS_XML).get_accounts(CUSTOMER_ID, INSTITUTION_ID)

        args, _ = self.rest_client.execute.call_args
        self.assertEqual(args, ("GET", "/v1/customers/41442/institutions/101732/accounts"))

    def test_get_account(self):
        account_xml = ACCOUNTS_XML.split("<account>")[1].split("</account>")[0]

        account = self._operations(200, f"<account>{account_xml}</account>").get_account(
            CUSTOMER_ID, ACCOUNT_ID)

        self.assertEqual(account.name, "Auto Loan")

    def test_activate_accounts(self):
        operations = self._operations(200, ACCOUNTS_XML)
        accounts = AccountList()

        result = operations.activate_accounts(CUSTOMER_ID, INSTITUTION_ID, accounts)

        self.assertEqual(len(result), 1)
        args, kwargs = self.rest_client.execute.call_args
        self.assertEqual(args, ("PUT", "/v2/customers/41442/institutions/101732/accounts"))
        self.assertIs(kwargs["body"], accounts)

    def test_refresh_accounts(self):
        self._operations(200, ACCOUNTS_XML).refresh_accounts(CUSTOMER_ID)

        args, _ = self.rest_client.execute.call_args
        self.assertEqual(args, ("POST", "/v1/customers/41442/accounts"))

    def test_modify_account_expects_204(self):
        operations = self._operations(204)
        account = MagicMock()

        operations.modify_account(CUSTOMER_ID, ACCOUNT_ID, account)

        args, _ = self.rest_client.execute.call_args
        self.assertEqual(args, ("PUT", "/v1/customers/41442/accounts/2083"))

        with self.assertRaises(AccountOperationsError):
            self._operations(200).modify_account(CUSTOMER_ID, ACCOUNT_ID, account)

    def test_delete_account(self):
        self._operations(204).delete_account(CUSTOMER_ID, ACCOUNT_ID)

        args, _ = self.rest_client.execute.call_args
        self.assertEqual(args, ("DELETE", "/v1/customers/41442/accounts/2083"))

    def test_delete_account_not_found(self):
        with self.assertRaises(AccountOperationsError) as context:
            self._operations(404, "not found").delete_account(CUSTOMER_ID, ACCOUNT_ID)

        self.assertEqual(context.exception.status_code, 404)

    def test_account_login_form(self):
        operations = self._operations(
            200, "<loginForm><loginField><id>1</id><name>User</name></loginField></loginForm>")

        login_form = operations.get_account_login_form(CUSTOMER_ID, ACCOUNT_ID)

        self.assertEqual(login_form.login_fields[0].name, "User")
        args, _ = self.rest_client.execute.call_args
        self.assertEqual(args, ("GET", "/v1/customers/41442/accounts/2083/loginForm"))

    def test_modify_account_credentials(self):
        operations = self._operations(204)

        operations.modify_account_credentials(CUSTOMER_ID, ACCOUNT_ID, MagicMock())

        args, _ = self.rest_client.execute.call_args
        self.assertEqual(args, ("PUT", "/v1/customers/41442/accounts/2083/loginForm"))


class TestResolveChallenges(unittest.TestCase):
    def _challenge(self, session):
        challenge_set = ChallengeSet(challenges=[MfaChallenge(questions=[MfaQuestion(text="Q")])])
        challenge_set.attach_session(session)
        return challenge_set

    def test_accounts_returned_as_is(self):
        accounts = AccountList()
        answer = MagicMock()
        resubmit = MagicMock()

        self.assertIs(resolve_challenges(accounts, answer, resubmit), accounts)
        answer.assert_not_called()
        resubmit.assert_not_called()

    def test_answers_until_accounts(self):
        accounts = AccountList()
        second = self._challenge("S2")
        resubmit = MagicMock(side_effect=[second, accounts])

        result = resolve_challenges(self._challenge("S1"), answered, resubmit)

        self.assertIs(result, accounts)
        self.assertEqual(resubmit.call_count, 2)
        sessions = [c.args[0].session for c in resubmit.call_args_list]
        self.assertEqual(sessions, ["S1", "S2"])
        self.assertEqual(second.questions[0].answer, "success")

    def test_round_limit(self):
        resubmit = MagicMock(side_effect=lambda c: self._challenge("again"))

        with self.assertRaises(ChallengeLimitError) as context:
            resolve_challenges(self._challenge("S1"), answered, resubmit, max_rounds=3)

        self.assertEqual(context.exception.rounds, 3)
        self.assertEqual(resubmit.call_count, 3)
        self.assertEqual(context.exception.challenge.session, "again")


if __name__ == '__main__':
    unittest.main()
