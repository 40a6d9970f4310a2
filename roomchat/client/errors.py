"""Error taxonomy for gateway failures and client-side preconditions."""
from typing import Any, Iterable, List, Optional

from ..shared.utils import error_messages


class APIError(Exception):
    """A failed server call. ``messages`` is an ordered list of readable strings."""

    default_messages: List[str] = ["The request failed."]

    def __init__(self, status: Optional[int] = None, body: Any = None, messages: Optional[Iterable[str]] = None):
        self.status = status
        self.body = body
        self.messages = list(messages) if messages is not None else error_messages(body, self.default_messages)
        super().__init__("; ".join(self.messages))

    @classmethod
    def from_response(cls, status: int, body: Any) -> "APIError":
        error_cls = STATUS_ERRORS.get(status, APIError)
        return error_cls(status, body)


class ValidationFailure(APIError):
    default_messages = ["The submitted data was invalid."]


class Unauthorized(APIError):
    default_messages = ["The provided credentials were invalid."]


class NotFound(APIError):
    default_messages = ["The requested record was not found."]


class TransportFailure(APIError):
    default_messages = ["Could not reach the server."]


class NotAuthenticated(Exception):
    """Raised before any network call when an action needs a signed-in user."""


STATUS_ERRORS = {
    401: Unauthorized,
    404: NotFound,
    422: ValidationFailure,
}
