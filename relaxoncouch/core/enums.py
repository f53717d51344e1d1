"""Core enumerations shared by the transport and changes-feed layers.

Key Types:
    - HTTPMethod: Verbs the request executor issues
    - FeedMode: The three mutually exclusive changes-feed modes
    - FailureKind: Classification attached to every CouchError
"""

from enum import Enum


class HTTPMethod(str, Enum):
    """HTTP verbs accepted by the request executor."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class FeedMode(str, Enum):
    """Changes feed polling modes.

    String enum so the value can be sent directly as the ``feed`` query
    parameter.
    """

    NORMAL = "normal"
    LONGPOLL = "longpoll"
    CONTINUOUS = "continuous"


class FailureKind(str, Enum):
    """Classification of a failed request or subscription."""

    TIMEOUT = "timeout"
    UNEXPECTED_CONTENT_TYPE = "unexpected_content_type"
    APPLICATION_ERROR = "application_error"
    TRANSPORT_ERROR = "transport_error"
    DECODE_ERROR = "decode_error"
    ABORTED = "aborted"
