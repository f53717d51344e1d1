"""Runtime layer: request execution, cancellation and streaming."""

from .abort import AbortControl
from .changes import (
    ChangesFeedController,
    ChangesResult,
    ContinuousChanges,
    LongPollChanges,
    NormalChanges,
)
from .rest import HTTPClient

__all__ = [
    "AbortControl",
    "ChangesFeedController",
    "ChangesResult",
    "ContinuousChanges",
    "LongPollChanges",
    "NormalChanges",
    "HTTPClient",
]
