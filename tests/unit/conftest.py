"""Shared fixtures: mocked aiohttp sessions and responses."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, Iterable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from relaxoncouch.core import BasicCredential, ServerConfig
from relaxoncouch.runtime.rest import HTTPClient

BASE = "http://localhost:5984/"


def make_response(
    payload: Any = None,
    *,
    status: int = 200,
    body: bytes | None = None,
    content_type: str | None = "application/json",
    chunks: Iterable[bytes] | None = None,
    hold_open: asyncio.Event | None = None,
) -> AsyncMock:
    """Build a mock aiohttp response usable as an async context manager.

    ``chunks`` feed ``response.content.iter_any()``; with ``hold_open`` the
    stream stays open after the last chunk until the event is set.
    """
    response = AsyncMock()
    response.status = status
    response.headers = {"Content-Type": content_type} if content_type else {}
    if body is None:
        body = json.dumps(payload).encode() if payload is not None else b""
    response.read = AsyncMock(return_value=body)

    async def iter_any():
        for chunk in chunks or ():
            yield chunk
        if hold_open is not None:
            await hold_open.wait()

    response.content = MagicMock()
    response.content.iter_any = iter_any
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


def make_hanging_response() -> MagicMock:
    """Context manager that never produces a response."""

    async def hang(*args, **kwargs):
        await asyncio.sleep(3600)

    cm = MagicMock()
    cm.__aenter__ = AsyncMock(side_effect=hang)
    cm.__aexit__ = AsyncMock(return_value=None)
    return cm


def attach_session(client: HTTPClient, *responses: Any) -> MagicMock:
    """Install a mock session whose ``request`` returns ``responses`` in order."""
    session = MagicMock()
    session.closed = False
    if len(responses) == 1:
        session.request = MagicMock(return_value=responses[0])
    else:
        session.request = MagicMock(side_effect=list(responses))
    client._session = session
    return session


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(
        base_address=BASE,
        credential=BasicCredential(username="admin", password="secret"),
        timeout_ms=1000,
    )


@pytest.fixture
def client(config: ServerConfig) -> HTTPClient:
    return HTTPClient(config)


@pytest.fixture
def response_factory() -> Callable[..., AsyncMock]:
    return make_response


@pytest.fixture
def hanging_response_factory() -> Callable[[], MagicMock]:
    return make_hanging_response


@pytest.fixture
def session_factory() -> Callable[..., MagicMock]:
    return attach_session
