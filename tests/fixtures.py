"""
Shared fixtures for the Finicity client tests
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

PROJECT_SRC = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(PROJECT_SRC))

from finicity_client.config import DEFAULT_BASE_URL
from finicity_client.models import Credentials, Token
from finicity_client.rest import Response

ACCESS_XML = "<access><token>TOKEN</token></access>"

ACCOUNTS_XML = """<accounts found="1" displaying="1" moreAvailable="false">
   <account>
      <id>2083</id>
      <number>8000008888</number>
      <name>Auto Loan</name>
      <type>loan</type>
      <status>active</status>
      <balance>-1234.56</balance>
      <aggregationStatusCode>125</aggregationStatusCode>
      <customerId>41442</customerId>
      <institutionId>101732</institutionId>
      <balanceDate>1421996400</balanceDate>
      <aggregationSuccessDate>1421996400</aggregationSuccessDate>
      <aggregationAttemptDate>1423239602</aggregationAttemptDate>
      <createdDate>1415255907</createdDate>
      <lastUpdatedDate>1422467353</lastUpdatedDate>
   </account>
</accounts>"""

CHALLENGE_XML = ("<accounts><mfaChallenges><questions><question><text>Q</text></question>"
                 "</questions></mfaChallenges></accounts>")


def create_credentials() -> Credentials:
    return Credentials(app_key="APP_KEY", partner_id="PARTNER_ID", partner_secret="PARTNER_SECRET")


class FakeClock:
    """Callable clock that only moves when told to"""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def create_token(value: str = "TOKEN", clock: FakeClock = None, minutes: int = 90) -> Token:
    now = clock() if clock else datetime.now(timezone.utc)
    return Token(value=value, expires_at=now + timedelta(minutes=minutes))


def create_token_guard(token: Token = None) -> MagicMock:
    guard = MagicMock()
    guard.current.return_value = token or create_token()
    return guard


def create_rest_client(status_code: int = 200, body: str = "", headers: dict = None) -> MagicMock:
    rest_client = MagicMock()
    rest_client.execute.return_value = Response(status_code, body, headers or {})
    return rest_client


def http_response(status_code: int, text: str = "", headers: dict = None) -> MagicMock:
    """Stand-in for a requests.Response"""
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.headers = headers or {}
    return response


class FakeSession:
    """requests.Session stand-in that answers by (method, path)

    Each route holds a queue of responses; the last one repeats.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL):
        self.base_url = base_url
        self.routes = {}
        self.request = MagicMock(side_effect=self._handle)
        self.close = MagicMock()

    def add(self, method: str, path: str, *responses):
        self.routes[(method, path)] = list(responses)

    def _handle(self, method, url, **kwargs):
        path = url[len(self.base_url):]
        queue = self.routes[(method, path)]
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def requests_to(self, method: str, path: str) -> list:
        """Keyword arguments of every request sent to this route"""
        url = self.base_url + path
        return [c.kwargs for c in self.request.call_args_list if c.args == (method, url)]


def authenticated_session() -> FakeSession:
    session = FakeSession()
    session.add("POST", "/v2/partners/authentication", http_response(200, ACCESS_XML))
    return session
