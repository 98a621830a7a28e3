"""Exceptions raised by the Bloom API gateway.

Every failure is a FetchError carrying a message fit to show the learner
(the server's envelope message where it sent one) and the call that failed.
Which failures are fatal is decided by the caller: the session loaders let
course and lesson failures through and absorb progress and stats failures.
"""

from typing import Any, Optional

UNAUTHORIZED_MESSAGE = "You are not authorized. Please log in again."


def envelope_message(envelope: Any) -> Optional[str]:
    """The `error.message` of a response envelope, if the server sent one."""
    if not isinstance(envelope, dict):
        return None
    error = envelope.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return None


class FetchError(Exception):
    """A gateway call failed.

    Attributes:
        message: Text fit to show the learner.
        endpoint: "METHOD /path" of the failed call, when known.
    """

    def __init__(self, message: str, endpoint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.endpoint = endpoint

    def __str__(self) -> str:
        if self.endpoint:
            return f"{self.message} ({self.endpoint})"
        return self.message


class HTTPStatusError(FetchError):
    """The server refused the call: a status >= 400, or an envelope with success=false.

    Attributes:
        status_code: HTTP status of the response.
        body: Raw response text, kept for logging.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        body: Optional[str] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(message, endpoint)
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_envelope(
        cls,
        envelope: Any,
        status_code: int,
        fallback: str,
        body: Optional[str] = None,
        endpoint: Optional[str] = None,
    ) -> "HTTPStatusError":
        """Build from a response envelope, using `fallback` when it carries no message."""
        return cls(envelope_message(envelope) or fallback, status_code, body=body, endpoint=endpoint)

    def __str__(self) -> str:
        return f"HTTP {self.status_code}: {super().__str__()}"


class UnauthorizedError(HTTPStatusError):
    """No token for an auth-only call, or the server answered 401."""

    def __init__(self, message: str = UNAUTHORIZED_MESSAGE, endpoint: Optional[str] = None):
        super().__init__(message, 401, endpoint=endpoint)


class InvalidResponseError(FetchError):
    """The body is not a JSON envelope, or lacks the payload key for the call."""


class ResponseDecodeError(FetchError):
    """The payload did not fit its model."""


class NetworkError(FetchError):
    """The request never completed (connection failure or timeout)."""
