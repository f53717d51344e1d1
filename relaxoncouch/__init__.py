"""Relax on Couch - async CouchDB client with a streaming changes feed."""

from .clients import CouchDatabase, CouchServer
from .core import (
    AbortedError,
    ApplicationError,
    BasicCredential,
    CouchError,
    DecodeError,
    FailureKind,
    FeedMode,
    HTTPMethod,
    ProxyCredential,
    RequestTimeoutError,
    ServerConfig,
    TransportError,
    UnexpectedContentTypeError,
)
from .models import (
    AllDocsParams,
    BasicErrorResponse,
    BasicResponse,
    ChangesFeed,
    ChangesFeedHeading,
    ChangesFeedRecord,
    ChangesOptions,
    MultipleViewResponse,
    PurgeResponse,
    QueryParams,
    SearchAnalyzeResponse,
    SearchParams,
    SearchResponse,
    ViewResponse,
)
from .runtime import (
    AbortControl,
    ContinuousChanges,
    HTTPClient,
    LongPollChanges,
    NormalChanges,
)

__version__ = "0.3.0"

__all__ = [
    "CouchDatabase",
    "CouchServer",
    "AbortedError",
    "ApplicationError",
    "BasicCredential",
    "CouchError",
    "DecodeError",
    "FailureKind",
    "FeedMode",
    "HTTPMethod",
    "ProxyCredential",
    "RequestTimeoutError",
    "ServerConfig",
    "TransportError",
    "UnexpectedContentTypeError",
    "AllDocsParams",
    "BasicErrorResponse",
    "BasicResponse",
    "ChangesFeed",
    "ChangesFeedHeading",
    "ChangesFeedRecord",
    "ChangesOptions",
    "MultipleViewResponse",
    "PurgeResponse",
    "QueryParams",
    "SearchAnalyzeResponse",
    "SearchParams",
    "SearchResponse",
    "ViewResponse",
    "AbortControl",
    "ContinuousChanges",
    "HTTPClient",
    "LongPollChanges",
    "NormalChanges",
]
