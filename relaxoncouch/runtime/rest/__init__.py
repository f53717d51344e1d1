"""REST runtime: the request executor."""

from .http_client import HTTPClient, is_json_content_type, read_json_response

__all__ = ["HTTPClient", "is_json_content_type", "read_json_response"]
