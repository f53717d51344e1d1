"""Shared fixtures for integration tests against a live CouchDB."""

import os

import pytest

# Skip all integration tests unless RUN_RELAXONCOUCH_NETWORK_TESTS=1
pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_RELAXONCOUCH_NETWORK_TESTS") != "1",
    reason="Requires a CouchDB server. Set RUN_RELAXONCOUCH_NETWORK_TESTS=1 and COUCHDB_URL to run",
)
