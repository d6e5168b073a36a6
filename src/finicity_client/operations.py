"""
Base class for the per-resource operations clients
"""
import logging
from typing import Any, Mapping, Optional, Type, TypeVar

from .exceptions import OperationError, TransportError
from .rest import Response, RestClient
from .serializer import deserialize

logger = logging.getLogger(__name__)

T = TypeVar('T')


class BaseOperations:
    """Sends token-authenticated requests and checks their status codes.

    Subclasses set ``error_class`` to the OperationError raised for their
    resource family.
    """
    error_class: Type[OperationError] = OperationError

    def __init__(self, rest_client: RestClient, token_guard):
        self.rest_client = rest_client
        self.token_guard = token_guard

    def _execute(self, method: str, path: str, params: Optional[Mapping[str, str]] = None,
                 body: Any = None, headers: Optional[Mapping[str, str]] = None) -> Response:
        token = self.token_guard.current()
        try:
            return self.rest_client.execute(method, path, params=params, body=body,
                                            headers=headers, token=token.value)
        except TransportError as e:
            raise self.error_class(f"{method} {path} failed: {e}") from e

    def _expect(self, response: Response, status_code: int, method: str, path: str) -> None:
        if response.status_code != status_code:
            logger.warning(f"{method} {path} returned {response.status_code}, expected {status_code}")
            raise self.error_class(f"Unexpected response to {method} {path}",
                                   response.status_code, response.body)

    def _get(self, path: str, cls: Type[T], params: Optional[Mapping[str, str]] = None) -> T:
        response = self._execute('GET', path, params=params)
        self._expect(response, 200, 'GET', path)
        return deserialize(response.body, cls)

    def _create(self, path: str, body: Any, cls: Type[T]) -> T:
        response = self._execute('POST', path, body=body)
        self._expect(response, 201, 'POST', path)
        return deserialize(response.body, cls)

    def _update(self, path: str, body: Any) -> None:
        response = self._execute('PUT', path, body=body)
        self._expect(response, 204, 'PUT', path)

    def _delete(self, path: str) -> None:
        response = self._execute('DELETE', path)
        self._expect(response, 204, 'DELETE', path)
