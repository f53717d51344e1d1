"""Credential resolution into request headers."""

from __future__ import annotations

import base64
from types import MappingProxyType

from .config import BasicCredential, Credential, ProxyCredential

PROXY_USERNAME_HEADER = "X-Auth-CouchDB-UserName"
PROXY_ROLES_HEADER = "X-Auth-CouchDB-Roles"
PROXY_TOKEN_HEADER = "X-Auth-CouchDB-Token"


def resolve_auth_headers(credential: Credential | None) -> dict[str, str]:
    """Return the authentication headers for a credential.

    No credential yields no headers; the server then rejects the request and
    the failure surfaces from the transport layer.
    """
    if credential is None:
        return {}
    if isinstance(credential, BasicCredential):
        token = base64.b64encode(f"{credential.username}:{credential.password}".encode())
        return {"Authorization": f"Basic {token.decode('ascii')}"}
    if isinstance(credential, ProxyCredential):
        headers = {
            PROXY_USERNAME_HEADER: credential.username,
            PROXY_TOKEN_HEADER: credential.token,
        }
        if credential.roles:
            headers[PROXY_ROLES_HEADER] = ",".join(credential.roles)
        return headers
    raise TypeError(f"Unsupported credential type: {type(credential).__name__}")


class Authenticator:
    """Resolves a credential once and hands out its headers."""

    def __init__(self, credential: Credential | None) -> None:
        self._headers = MappingProxyType(resolve_auth_headers(credential))

    @property
    def headers(self) -> MappingProxyType[str, str]:
        return self._headers

    def apply(self, headers: dict[str, str]) -> dict[str, str]:
        """Merge the auth headers into ``headers`` and return it."""
        headers.update(self._headers)
        return headers
