"""
HTTP transport for the Finicity REST API
"""
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import requests
from requests.structures import CaseInsensitiveDict

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from .exceptions import TransportError
from .serializer import serialize

logger = logging.getLogger(__name__)

APP_KEY_HEADER = 'Finicity-App-Key'
APP_TOKEN_HEADER = 'Finicity-App-Token'
MFA_SESSION_HEADER = 'MFA-Session'

CONTENT_TYPE = 'application/xml'


@dataclass
class Response:
    """Status, body and headers of a completed HTTP exchange"""
    status_code: int
    body: str = ''
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)

    def __post_init__(self):
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers or {})


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def build_params(**params) -> Dict[str, str]:
    """Query parameters with unset and blank values dropped"""
    result = {}
    for name, value in params.items():
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        result[name] = _query_value(value)
    return result


class RestClient:
    """Issues requests against the API base URL with the Finicity headers"""

    def __init__(self, app_key: str, base_url: str = DEFAULT_BASE_URL,
                 timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 session: Optional[requests.Session] = None):
        self.app_key = app_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self, token: Optional[str], extra: Optional[Mapping[str, str]]) -> Dict[str, str]:
        headers = {
            'Content-Type': CONTENT_TYPE,
            'Accept': CONTENT_TYPE,
            APP_KEY_HEADER: self.app_key,
        }
        if token:
            headers[APP_TOKEN_HEADER] = token
        if extra:
            headers.update(extra)
        return headers

    def execute(self, method: str, path: str, params: Optional[Mapping[str, str]] = None,
                body: Any = None, headers: Optional[Mapping[str, str]] = None,
                token: Optional[str] = None) -> Response:
        """Send one request and return the response, whatever its status.

        ``body`` may be a model instance (serialized to XML) or a string.
        Raises TransportError when no response could be obtained.
        """
        url = f"{self.base_url}{path}"
        data = serialize(body) if body is not None and not isinstance(body, str) else body

        logger.debug(f"{method} {path} params={dict(params or {})}")
        try:
            response = self.session.request(
                method,
                url,
                params=params or None,
                data=data.encode('utf-8') if data else None,
                headers=self._headers(token, headers),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransportError(f"{method} {path} failed: {e}") from e

        logger.debug(f"{method} {path} -> {response.status_code}")
        return Response(
            status_code=response.status_code,
            body=response.text,
            headers=response.headers,
        )

    def close(self):
        self.session.close()
