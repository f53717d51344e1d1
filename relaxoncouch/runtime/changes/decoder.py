"""Incremental decoder for newline-delimited JSON change records.

Chunk boundaries from the transport do not line up with record boundaries.
A FeedState holds the bytes of the record currently being assembled and is
owned by the single task reading one subscription; it is not safe to share.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

NEWLINE = b"\n"


@dataclass
class FeedState:
    """Per-subscription decode state."""

    buffer: bytearray = field(default_factory=bytearray)
    records_seen: int = 0

    @property
    def pending(self) -> bool:
        """True while a partial record is buffered."""
        return bool(self.buffer)


def is_heading(value: Any) -> bool:
    """Heading records are the ones without a ``seq`` field."""
    return isinstance(value, dict) and "seq" not in value


def process_chunk(state: FeedState, chunk: bytes) -> list[Any]:
    """Feed one transport chunk and return the JSON values it completes.

    - An empty chunk is ignored.
    - A chunk that is exactly one newline is a heartbeat: it is discarded and
      the pending buffer is left as is.
    - Otherwise every newline closes the record formed by the buffer plus the
      bytes before it; blank lines are skipped. Bytes after the last newline
      stay buffered.

    Raises:
        ValueError: A completed line is not valid UTF-8 JSON (the buffer is
            cleared first so the state stays consistent).
    """
    if not chunk or chunk == NEWLINE:
        return []

    values: list[Any] = []
    *complete, remainder = chunk.split(NEWLINE)
    for segment in complete:
        state.buffer.extend(segment)
        line = bytes(state.buffer)
        state.buffer.clear()
        if not line.strip():
            continue
        values.append(json.loads(line.decode("utf-8")))
    state.buffer.extend(remainder)
    return values
