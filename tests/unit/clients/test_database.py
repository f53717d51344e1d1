"""Unit tests for CouchDatabase path building and response typing."""

from __future__ import annotations

import json

import pytest

from relaxoncouch.clients import CouchDatabase
from relaxoncouch.clients.database import design_path, doc_path
from relaxoncouch.models import (
    BasicErrorResponse,
    BasicResponse,
    MultipleViewResponse,
    PurgeResponse,
    QueryParams,
    SearchParams,
    SearchResponse,
    ViewResponse,
)
from relaxoncouch.runtime.changes import NormalChanges

BASE = "http://localhost:5984/"


def _call(session):
    call = session.request.call_args
    data = call.kwargs["data"]
    return call.args[0], call.args[1], json.loads(data) if data is not None else None


class TestPaths:
    """Test path helpers."""

    def test_doc_path_encodes_ids(self):
        """Test ids are percent-encoded."""
        assert doc_path("a b/c") == "a%20b%2Fc"

    def test_doc_path_keeps_design_prefix(self):
        """Test _design/ and _local/ prefixes stay literal."""
        assert doc_path("_design/app") == "_design/app"
        assert doc_path("_local/cp 1") == "_local/cp%201"

    def test_design_path(self):
        """Test view and search index paths."""
        assert design_path("app/by_date") == "_design/app/_view/by_date"
        assert design_path("app/fulltext", "search") == "_design/app/_search/fulltext"

    def test_design_path_requires_both_parts(self):
        """Test malformed index paths are rejected."""
        with pytest.raises(ValueError):
            design_path("app")

    def test_empty_db_name(self, client):
        """Test empty database names are rejected."""
        with pytest.raises(ValueError):
            CouchDatabase(client, "")


class TestDocumentOperations:
    """Test CRUD wrappers."""

    def test_url(self, client):
        """Test the database URL."""
        assert CouchDatabase(client, "notes").url == BASE + "notes"

    @pytest.mark.asyncio
    async def test_get(self, client, response_factory, session_factory):
        """Test get issues GET on the document path."""
        session = session_factory(client, response_factory({"_id": "a", "_rev": "1-x"}))
        doc = await CouchDatabase(client, "notes").get("a")
        assert doc["_rev"] == "1-x"
        assert _call(session) == ("GET", BASE + "notes/a", None)

    @pytest.mark.asyncio
    async def test_put(self, client, response_factory, session_factory):
        """Test put sends the document to its _id."""
        session = session_factory(client, response_factory({"ok": True, "id": "a", "rev": "1-x"}))
        result = await CouchDatabase(client, "notes").put({"_id": "a", "title": "t"})
        assert isinstance(result, BasicResponse)
        assert _call(session) == ("PUT", BASE + "notes/a", {"_id": "a", "title": "t"})

    @pytest.mark.asyncio
    async def test_put_requires_id(self, client):
        """Test put without _id is rejected before any request."""
        with pytest.raises(ValueError):
            await CouchDatabase(client, "notes").put({"title": "t"})

    @pytest.mark.asyncio
    async def test_remove(self, client, response_factory, session_factory):
        """Test remove sends the revision as a query parameter."""
        session = session_factory(client, response_factory({"ok": True, "id": "a", "rev": "2-y"}))
        await CouchDatabase(client, "notes").remove("a", "1-x")
        assert _call(session) == ("DELETE", BASE + "notes/a?rev=1-x", None)

    @pytest.mark.asyncio
    async def test_bulk_docs(self, client, response_factory, session_factory):
        """Test bulk_docs returns typed per-document results."""
        session = session_factory(
            client,
            response_factory(
                [
                    {"ok": True, "id": "a", "rev": "1-x"},
                    {"id": "b", "error": "conflict", "reason": "Document update conflict."},
                ]
            ),
        )
        results = await CouchDatabase(client, "notes").bulk_docs([{"_id": "a"}, {"_id": "b"}])
        assert isinstance(results[0], BasicResponse)
        assert isinstance(results[1], BasicErrorResponse)
        assert _call(session)[2] == {"docs": [{"_id": "a"}, {"_id": "b"}]}

    @pytest.mark.asyncio
    async def test_purge_docs(self, client, response_factory, session_factory):
        """Test purge_docs posts the id/revs map."""
        session = session_factory(
            client, response_factory({"purge_seq": None, "purged": {"a": ["1-x"]}})
        )
        result = await CouchDatabase(client, "notes").purge_docs({"a": ("1-x",)})
        assert isinstance(result, PurgeResponse)
        assert _call(session) == ("POST", BASE + "notes/_purge", {"a": ["1-x"]})


class TestIndexOperations:
    """Test view and search wrappers."""

    @pytest.mark.asyncio
    async def test_all_docs(self, client, response_factory, session_factory):
        """Test all_docs posts params to _all_docs."""
        session = session_factory(client, response_factory({"total_rows": 0, "offset": 0, "rows": []}))
        result = await CouchDatabase(client, "notes").all_docs({"limit": 2, "skip": None})
        assert isinstance(result, ViewResponse)
        assert _call(session) == ("POST", BASE + "notes/_all_docs", {"limit": 2})

    @pytest.mark.asyncio
    async def test_all_docs_queries(self, client, response_factory, session_factory):
        """Test all_docs_queries wraps the query list."""
        session = session_factory(client, response_factory({"results": [{"rows": []}]}))
        result = await CouchDatabase(client, "notes").all_docs_queries([{"keys": ["a"]}])
        assert isinstance(result, MultipleViewResponse)
        assert _call(session)[1:] == (BASE + "notes/_all_docs/queries", {"queries": [{"keys": ["a"]}]})

    @pytest.mark.asyncio
    async def test_query(self, client, response_factory, session_factory):
        """Test query targets the design document view."""
        session = session_factory(client, response_factory({"total_rows": 1, "offset": 0, "rows": []}))
        await CouchDatabase(client, "notes").query("app/by_tag", QueryParams(key="x", reduce=False))
        assert _call(session) == (
            "POST",
            BASE + "notes/_design/app/_view/by_tag",
            {"key": "x", "reduce": False},
        )

    @pytest.mark.asyncio
    async def test_queries(self, client, response_factory, session_factory):
        """Test queries targets the view's queries endpoint."""
        session = session_factory(client, response_factory({"results": []}))
        await CouchDatabase(client, "notes").queries("app/by_tag", [QueryParams(limit=1)])
        assert _call(session)[1] == BASE + "notes/_design/app/_view/by_tag/queries"

    @pytest.mark.asyncio
    async def test_search(self, client, response_factory, session_factory):
        """Test search targets the design document search index."""
        session = session_factory(
            client,
            response_factory(
                {"total_rows": 1, "bookmark": "g1", "rows": [{"id": "a", "order": [1.0], "fields": {}}]}
            ),
        )
        result = await CouchDatabase(client, "notes").search("app/text", SearchParams(query="title:x"))
        assert isinstance(result, SearchResponse)
        assert result.rows[0].id == "a"
        assert _call(session) == ("POST", BASE + "notes/_design/app/_search/text", {"query": "title:x"})


class TestChanges:
    """Test the changes entry point."""

    @pytest.mark.asyncio
    async def test_changes_delegates_to_controller(
        self, client, response_factory, session_factory
    ):
        """Test changes() uses the database path."""
        session = session_factory(client, response_factory({"results": [], "last_seq": 0}))
        result = await CouchDatabase(client, "notes").changes()
        assert isinstance(result, NormalChanges)
        assert _call(session)[1] == BASE + "notes/_changes?feed=normal&since=0"
