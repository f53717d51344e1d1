"""Custom exception hierarchy.

Every failure raised by the client is a CouchError carrying the HTTP method
and path of the request that produced it, so callers can attribute it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .enums import FailureKind


class CouchError(Exception):
    """Base exception for all client failures."""

    kind: FailureKind = FailureKind.TRANSPORT_ERROR

    def __init__(
        self,
        message: str,
        *,
        method: str,
        path: str,
        status_code: int | None = None,
        response_body: Any = None,
        response_headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.path = path
        self.status_code = status_code
        self.response_body = response_body
        self.response_headers = dict(response_headers) if response_headers is not None else None

    @property
    def cause(self) -> BaseException | None:
        """Underlying exception, if this failure wraps one."""
        return self.__cause__

    def __str__(self) -> str:
        message = super().__str__()
        return f"{message} ({self.method} {self.path})"


class RequestTimeoutError(CouchError):
    """No response arrived before the configured deadline."""

    kind = FailureKind.TIMEOUT


class UnexpectedContentTypeError(CouchError):
    """Server answered with something other than JSON.

    ``response_body`` holds the raw body text and ``response_headers`` the
    headers, for diagnosis.
    """

    kind = FailureKind.UNEXPECTED_CONTENT_TYPE


class ApplicationError(CouchError):
    """Server returned a JSON error payload ``{error, reason}``."""

    kind = FailureKind.APPLICATION_ERROR

    def __init__(
        self,
        message: str,
        *,
        error: str,
        reason: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.error = error
        self.reason = reason


class TransportError(CouchError):
    """Connection, DNS, TLS or protocol fault below the HTTP layer."""

    kind = FailureKind.TRANSPORT_ERROR


class DecodeError(CouchError):
    """A response body or streamed record could not be decoded."""

    kind = FailureKind.DECODE_ERROR


class AbortedError(CouchError):
    """Operation was cancelled, or its connection closed before completing."""

    kind = FailureKind.ABORTED
