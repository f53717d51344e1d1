"""Core types: configuration, authentication, enums and exceptions."""

from .auth import Authenticator, resolve_auth_headers
from .config import (
    DEFAULT_HEARTBEAT_MS,
    DEFAULT_TIMEOUT_MS,
    BasicCredential,
    Credential,
    ProxyCredential,
    ServerConfig,
)
from .enums import FailureKind, FeedMode, HTTPMethod
from .exceptions import (
    AbortedError,
    ApplicationError,
    CouchError,
    DecodeError,
    RequestTimeoutError,
    TransportError,
    UnexpectedContentTypeError,
)

__all__ = [
    "Authenticator",
    "resolve_auth_headers",
    "DEFAULT_HEARTBEAT_MS",
    "DEFAULT_TIMEOUT_MS",
    "BasicCredential",
    "Credential",
    "ProxyCredential",
    "ServerConfig",
    "FailureKind",
    "FeedMode",
    "HTTPMethod",
    "AbortedError",
    "ApplicationError",
    "CouchError",
    "DecodeError",
    "RequestTimeoutError",
    "TransportError",
    "UnexpectedContentTypeError",
]
