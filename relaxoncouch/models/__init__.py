"""Wire models for the changes feed and database operations."""

from .changes import (
    ChangeRevision,
    ChangesFeed,
    ChangesFeedHeading,
    ChangesFeedRecord,
    ChangesOptions,
)
from .documents import (
    AllDocsParams,
    BasicErrorResponse,
    BasicResponse,
    BulkDocsResult,
    MultipleViewResponse,
    PurgeResponse,
    QueryParams,
    SearchAnalyzeResponse,
    SearchParams,
    SearchResponse,
    SearchRow,
    ViewResponse,
    ViewRow,
)

__all__ = [
    "ChangeRevision",
    "ChangesFeed",
    "ChangesFeedHeading",
    "ChangesFeedRecord",
    "ChangesOptions",
    "AllDocsParams",
    "BasicErrorResponse",
    "BasicResponse",
    "BulkDocsResult",
    "MultipleViewResponse",
    "PurgeResponse",
    "QueryParams",
    "SearchAnalyzeResponse",
    "SearchParams",
    "SearchResponse",
    "SearchRow",
    "ViewResponse",
    "ViewRow",
]
