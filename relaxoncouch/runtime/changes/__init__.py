"""Changes feed runtime: mode dispatch and incremental decoding."""

from .controller import (
    ChangesFeedController,
    ChangesResult,
    ContinuousChanges,
    LongPollChanges,
    NormalChanges,
    RecordCallback,
    RecordDispatcher,
    build_changes_request,
)
from .decoder import FeedState, is_heading, process_chunk

__all__ = [
    "ChangesFeedController",
    "ChangesResult",
    "ContinuousChanges",
    "LongPollChanges",
    "NormalChanges",
    "RecordCallback",
    "RecordDispatcher",
    "build_changes_request",
    "FeedState",
    "is_heading",
    "process_chunk",
]
