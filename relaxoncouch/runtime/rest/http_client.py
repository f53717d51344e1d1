"""Request executor: authenticated JSON requests over aiohttp.

Every outcome is either the decoded JSON payload or a CouchError subclass
carrying the request's method and path. Lower-level aiohttp/socket faults are
never allowed to escape unclassified.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any

import aiohttp
from pydantic import TypeAdapter, ValidationError

from ...core.auth import Authenticator
from ...core.config import ServerConfig
from ...core.enums import HTTPMethod
from ...core.exceptions import (
    AbortedError,
    ApplicationError,
    DecodeError,
    RequestTimeoutError,
    TransportError,
    UnexpectedContentTypeError,
)
from ..abort import AbortControl

logger = logging.getLogger(__name__)


def is_json_content_type(content_type: str | None) -> bool:
    """Check whether a Content-Type header denotes JSON."""
    if not content_type:
        return False
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime == "application/json" or mime.endswith("+json")


@lru_cache(maxsize=None)
def _adapter(response_model: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_model)


async def read_json_response(response: aiohttp.ClientResponse, method: str, path: str) -> Any:
    """Drain a response and classify it.

    Returns the decoded payload on success; raises UnexpectedContentTypeError,
    DecodeError or ApplicationError otherwise. The body is always read in
    full so the connection can be released.
    """
    raw = await response.read()
    headers = dict(response.headers)
    status = response.status

    if method == HTTPMethod.HEAD.value:
        if status >= 400:
            raise ApplicationError(
                f"HTTP {status}",
                error=f"http_{status}",
                method=method,
                path=path,
                status_code=status,
                response_headers=headers,
            )
        return headers

    content_type = response.headers.get("Content-Type")
    if not is_json_content_type(content_type):
        text = raw.decode("utf-8", errors="replace")
        logger.warning(
            "Non-JSON response",
            extra={"method": method, "path": path, "status": status, "content_type": content_type},
        )
        raise UnexpectedContentTypeError(
            f"Expected a JSON response, got {content_type!r}",
            method=method,
            path=path,
            status_code=status,
            response_body=text,
            response_headers=headers,
        )

    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise DecodeError(
            "Response body is not valid JSON",
            method=method,
            path=path,
            status_code=status,
            response_body=raw.decode("utf-8", errors="replace"),
            response_headers=headers,
        ) from exc

    if isinstance(payload, dict) and "error" in payload:
        reason = payload.get("reason")
        raise ApplicationError(
            f"{payload['error']}: {reason}" if reason else str(payload["error"]),
            error=str(payload["error"]),
            reason=reason,
            method=method,
            path=path,
            status_code=status,
            response_body=payload,
            response_headers=headers,
        )
    if status >= 400:
        raise ApplicationError(
            f"HTTP {status}",
            error=f"http_{status}",
            method=method,
            path=path,
            status_code=status,
            response_body=payload,
            response_headers=headers,
        )
    return payload


class HTTPClient:
    """Async HTTP client bound to one ServerConfig."""

    def __init__(self, config: ServerConfig) -> None:
        self.config = config
        self.base_url = config.base_address
        self.timeout = config.timeout
        self._auth = Authenticator(config.credential)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            # Deadlines are enforced per call; streams must be allowed to stay open
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))
        return self._session

    def url_for(self, path: str) -> str:
        return self.base_url + path.lstrip("/")

    def build_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        return self._auth.apply(headers)

    async def execute(
        self,
        path: str,
        method: HTTPMethod | str = HTTPMethod.GET,
        body: Any = None,
        *,
        response_model: Any = None,
    ) -> Any:
        """Issue one request bounded by the configured timeout.

        Args:
            path: Path relative to the server base address (may carry a query)
            method: HTTP verb
            body: JSON-serializable request body
            response_model: Optional pydantic model (or type) to validate into

        Raises:
            RequestTimeoutError: No response within ``config.timeout_ms``
            UnexpectedContentTypeError: Response is not JSON
            ApplicationError: Server returned ``{error, reason}``
            TransportError: Connection-level failure
            DecodeError: Body or model validation failed
        """
        verb = HTTPMethod(method).value
        try:
            payload = await asyncio.wait_for(self._send(verb, path, body), self.timeout)
        except asyncio.TimeoutError as exc:
            logger.debug("Request timed out", extra={"method": verb, "path": path})
            raise RequestTimeoutError(
                f"No response within {self.config.timeout_ms}ms", method=verb, path=path
            ) from exc
        return self._validate(payload, response_model, verb, path)

    def execute_with_control(
        self,
        path: str,
        method: HTTPMethod | str = HTTPMethod.GET,
        body: Any = None,
        *,
        response_model: Any = None,
    ) -> tuple[asyncio.Task[Any], AbortControl]:
        """Start a request the caller can cancel.

        No timeout is installed; the caller owns cancellation timing. Awaiting
        the returned task after ``control.abort()`` raises AbortedError, and
        ``control.on_abort`` completes once the request's connection closes.
        """
        verb = HTTPMethod(method).value
        control = AbortControl()
        inner = asyncio.ensure_future(self._send(verb, path, body))
        control.bind(inner.cancel)
        inner.add_done_callback(lambda _task: control.settle())
        outcome = asyncio.ensure_future(
            self._await_controlled(inner, control, verb, path, response_model)
        )
        return outcome, control

    @asynccontextmanager
    async def open_stream(
        self,
        path: str,
        method: HTTPMethod | str = HTTPMethod.GET,
        body: Any = None,
    ) -> AsyncIterator[aiohttp.ClientResponse]:
        """Open a raw response for incremental reading.

        Error responses are drained and classified before anything is
        yielded. Transport faults raised while the caller reads the body are
        reported as TransportError.
        """
        verb = HTTPMethod(method).value
        data = json.dumps(body) if body is not None else None
        logger.debug("Opening stream", extra={"method": verb, "path": path})
        try:
            async with self.session.request(
                verb, self.url_for(path), headers=self.build_headers(), data=data
            ) as response:
                if response.status >= 400:
                    await read_json_response(response, verb, path)
                yield response
        except (aiohttp.ClientError, OSError) as exc:
            raise TransportError(
                f"Stream connection failed: {exc}", method=verb, path=path
            ) from exc

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _send(self, method: str, path: str, body: Any) -> Any:
        data = json.dumps(body) if body is not None else None
        logger.debug("Sending request", extra={"method": method, "path": path})
        try:
            async with self.session.request(
                method, self.url_for(path), headers=self.build_headers(), data=data
            ) as response:
                payload = await read_json_response(response, method, path)
        except (aiohttp.ClientError, OSError) as exc:
            raise TransportError(
                f"Connection to the database failed: {exc}", method=method, path=path
            ) from exc
        logger.debug("Request completed", extra={"method": method, "path": path})
        return payload

    async def _await_controlled(
        self,
        inner: asyncio.Task[Any],
        control: AbortControl,
        method: str,
        path: str,
        response_model: Any,
    ) -> Any:
        try:
            payload = await inner
        except asyncio.CancelledError:
            if not control.aborted:
                raise
            raise AbortedError("Request aborted", method=method, path=path) from None
        return self._validate(payload, response_model, method, path)

    def _validate(self, payload: Any, response_model: Any, method: str, path: str) -> Any:
        if response_model is None:
            return payload
        try:
            return _adapter(response_model).validate_python(payload)
        except ValidationError as exc:
            raise DecodeError(
                f"Response does not match {getattr(response_model, '__name__', response_model)}",
                method=method,
                path=path,
                response_body=payload,
            ) from exc
