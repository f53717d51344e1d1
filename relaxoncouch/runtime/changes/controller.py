"""Changes feed controller.

Architecture:
    One logical operation, ``changes(mode, options, on_record)``, dispatched
    over three mutually exclusive feed modes. Each mode has its own concrete
    result type so callers match on the variant instead of guessing the
    shape:

    - NORMAL: one buffered request through the request executor, returns
      ``NormalChanges`` holding the whole ChangesFeed.
    - LONGPOLL: one cancellable request (``execute_with_control``), returns
      ``LongPollChanges`` with the pending outcome and its AbortControl.
    - CONTINUOUS: a raw streaming request decoded incrementally, returns
      ``ContinuousChanges`` with the heading future and its AbortControl.
      Records are handed to ``on_record`` by a RecordDispatcher task.

Design Decisions:
    - Decode state lives in a FeedState owned by the task reading the
      stream; nothing else touches it.
    - One dispatcher task per subscription keeps callbacks in feed order,
      including async callbacks and callables returning awaitables.
    - An ``{"error", "reason"}`` line ends the stream with ApplicationError.
    - Every continuous subscription settles its heading future: with the
      heading, with the stream fault, or with AbortedError when the
      connection closes first.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union
from urllib.parse import urlencode

from pydantic import ValidationError

from ...core.enums import FeedMode, HTTPMethod
from ...core.exceptions import AbortedError, ApplicationError, DecodeError
from ...models.changes import ChangesFeed, ChangesFeedHeading, ChangesFeedRecord, ChangesOptions
from ..abort import AbortControl
from ..rest.http_client import HTTPClient
from .decoder import FeedState, is_heading, process_chunk

logger = logging.getLogger(__name__)

RecordCallback = Callable[[ChangesFeedRecord], Awaitable[None]] | Callable[[ChangesFeedRecord], None]


@dataclass(frozen=True)
class NormalChanges:
    feed: ChangesFeed

    mode = FeedMode.NORMAL


@dataclass(frozen=True)
class LongPollChanges:
    outcome: asyncio.Task[ChangesFeed]
    control: AbortControl

    mode = FeedMode.LONGPOLL


@dataclass(frozen=True)
class ContinuousChanges:
    heading: asyncio.Future[ChangesFeedHeading]
    control: AbortControl

    mode = FeedMode.CONTINUOUS


ChangesResult = Union[NormalChanges, LongPollChanges, ContinuousChanges]


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def build_changes_request(
    db_path: str,
    mode: FeedMode,
    options: ChangesOptions,
    heartbeat_ms: int,
) -> tuple[str, dict[str, Any] | None]:
    """Build the ``_changes`` path (with query) and optional filter body.

    Defaults (``feed``, ``since``, implicit ``heartbeat``) are overridden by
    any option the caller set.
    """
    defaults: dict[str, Any] = {
        "feed": mode.value,
        "since": 0 if mode is FeedMode.NORMAL else "now",
    }
    if mode is not FeedMode.NORMAL and options.timeout is None:
        defaults["heartbeat"] = heartbeat_ms

    merged = {**defaults, **options.query_fields()}
    query = urlencode({key: _query_value(value) for key, value in merged.items()}, safe=",")
    return f"{db_path.rstrip('/')}/_changes?{query}", options.body()


class RecordDispatcher:
    """Delivers one subscription's records to its callback, in feed order.

    Records are queued by the decode step and handed over by a single task,
    so delivery never happens inside the decode step and an awaiting
    callback cannot be overtaken by a later record. Callback failures are
    logged and do not stop delivery.
    """

    def __init__(self, on_record: RecordCallback) -> None:
        self._on_record = on_record
        self._queue: asyncio.Queue[ChangesFeedRecord | None] = asyncio.Queue()
        self.task = asyncio.create_task(self._drain())

    def push(self, record: ChangesFeedRecord) -> None:
        self._queue.put_nowait(record)

    def close(self) -> None:
        """Stop once every queued record has been delivered."""
        self._queue.put_nowait(None)

    async def _drain(self) -> None:
        while True:
            record = await self._queue.get()
            if record is None:
                return
            try:
                result = self._on_record(record)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Changes callback failed", extra={"seq": record.seq})


class ChangesFeedController:
    """Issues changes requests for one database."""

    def __init__(self, client: HTTPClient, db_path: str) -> None:
        self._client = client
        self._db_path = db_path
        self._dispatch_tasks: set[asyncio.Task[None]] = set()

    async def changes(
        self,
        mode: FeedMode | str = FeedMode.NORMAL,
        options: ChangesOptions | Mapping[str, Any] | None = None,
        on_record: RecordCallback | None = None,
    ) -> ChangesResult:
        """Query the changes feed in the requested mode.

        Args:
            mode: normal, longpoll or continuous
            options: ChangesOptions or a mapping of its fields
            on_record: Per-record callback (plain or async), required for
                continuous mode

        Returns:
            NormalChanges, LongPollChanges or ContinuousChanges
        """
        feed_mode = FeedMode(mode)
        opts = options if isinstance(options, ChangesOptions) else ChangesOptions(**(options or {}))
        path, body = build_changes_request(
            self._db_path, feed_mode, opts, self._client.config.heartbeat_ms
        )
        method = HTTPMethod.POST if body is not None else HTTPMethod.GET

        if feed_mode is FeedMode.NORMAL:
            feed = await self._client.execute(path, method, body, response_model=ChangesFeed)
            return NormalChanges(feed)

        if feed_mode is FeedMode.LONGPOLL:
            outcome, control = self._client.execute_with_control(
                path, method, body, response_model=ChangesFeed
            )
            return LongPollChanges(outcome, control)

        if on_record is None:
            raise ValueError("continuous changes require an on_record callback")
        return self.subscribe(path, method, body, on_record)

    def subscribe(
        self,
        path: str,
        method: HTTPMethod,
        body: dict[str, Any] | None,
        on_record: RecordCallback,
    ) -> ContinuousChanges:
        """Open a continuous feed and start decoding it in a background task."""
        loop = asyncio.get_running_loop()
        heading: asyncio.Future[ChangesFeedHeading] = loop.create_future()
        control = AbortControl()
        state = FeedState()
        dispatcher = RecordDispatcher(on_record)
        self._dispatch_tasks.add(dispatcher.task)
        dispatcher.task.add_done_callback(self._dispatch_tasks.discard)

        task = asyncio.create_task(self._read_stream(path, method, body, state, dispatcher, heading))
        control.bind(task.cancel)
        task.add_done_callback(
            lambda t: self._on_stream_closed(
                t, state, dispatcher, heading, control, method.value, path
            )
        )
        logger.debug("Subscribed to continuous changes", extra={"path": path})
        return ContinuousChanges(heading, control)

    async def _read_stream(
        self,
        path: str,
        method: HTTPMethod,
        body: dict[str, Any] | None,
        state: FeedState,
        dispatcher: RecordDispatcher,
        heading: asyncio.Future[ChangesFeedHeading],
    ) -> None:
        async with self._client.open_stream(path, method, body) as response:
            async for chunk in response.content.iter_any():
                try:
                    values = process_chunk(state, chunk)
                except ValueError as exc:
                    raise DecodeError(
                        "Malformed changes record",
                        method=method.value,
                        path=path,
                        response_body=chunk.decode("utf-8", errors="replace"),
                    ) from exc
                for value in values:
                    self._handle_value(value, state, dispatcher, heading, method.value, path)

    def _handle_value(
        self,
        value: Any,
        state: FeedState,
        dispatcher: RecordDispatcher,
        heading: asyncio.Future[ChangesFeedHeading],
        method: str,
        path: str,
    ) -> None:
        if isinstance(value, dict) and "error" in value:
            reason = value.get("reason")
            raise ApplicationError(
                f"{value['error']}: {reason}" if reason else str(value["error"]),
                error=str(value["error"]),
                reason=reason,
                method=method,
                path=path,
                response_body=value,
            )

        if is_heading(value):
            parsed = self._parse(ChangesFeedHeading, value, method, path)
            if not heading.done():
                heading.set_result(parsed)
            logger.debug("Changes heading received", extra={"path": path})
            return

        record = self._parse(ChangesFeedRecord, value, method, path)
        state.records_seen += 1
        dispatcher.push(record)

    @staticmethod
    def _parse(model: Any, value: Any, method: str, path: str) -> Any:
        try:
            return model.model_validate(value)
        except ValidationError as exc:
            raise DecodeError(
                "Unexpected changes record shape", method=method, path=path, response_body=value
            ) from exc

    @staticmethod
    def _on_stream_closed(
        task: asyncio.Task[None],
        state: FeedState,
        dispatcher: RecordDispatcher,
        heading: asyncio.Future[ChangesFeedHeading],
        control: AbortControl,
        method: str,
        path: str,
    ) -> None:
        dispatcher.close()
        error: BaseException | None = None
        if not task.cancelled():
            error = task.exception()
        if not heading.done():
            if error is None:
                reason = "aborted" if control.aborted else "closed before a heading was received"
                logger.warning(
                    "Changes feed ended without heading",
                    extra={"path": path, "reason": reason, "records": state.records_seen},
                )
                error = AbortedError(f"Changes feed {reason}", method=method, path=path)
            heading.set_exception(error)
        elif error is not None:
            logger.warning("Changes feed failed after heading", exc_info=error, extra={"path": path})
        control.settle()
        logger.debug("Changes feed closed", extra={"path": path})
