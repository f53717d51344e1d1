"""Database-scoped operations.

Thin path builders over the request executor; the changes feed is delegated
to ChangesFeedController.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote

from ..core.enums import FeedMode, HTTPMethod
from ..models.changes import ChangesOptions
from ..models.documents import (
    AllDocsParams,
    BasicResponse,
    BulkDocsResult,
    MultipleViewResponse,
    PurgeResponse,
    QueryParams,
    SearchParams,
    SearchResponse,
    ViewResponse,
)
from ..runtime.changes import ChangesFeedController, ChangesResult, RecordCallback
from ..runtime.rest import HTTPClient

Params = Mapping[str, Any]


def _body(params: Any) -> dict[str, Any]:
    if params is None:
        return {}
    if hasattr(params, "to_body"):
        return params.to_body()
    return {k: v for k, v in dict(params).items() if v is not None}


def doc_path(doc_id: str) -> str:
    """Percent-encode a document id, keeping the ``_design/`` and ``_local/`` prefixes."""
    for prefix in ("_design/", "_local/"):
        if doc_id.startswith(prefix):
            return prefix + quote(doc_id[len(prefix) :], safe="")
    return quote(doc_id, safe="")


def design_path(path: str, index_type: str = "view") -> str:
    """Map ``"ddoc/index"`` to ``_design/ddoc/_<index_type>/index``."""
    design_doc, sep, index_name = path.partition("/")
    if not sep or not design_doc or not index_name:
        raise ValueError(f"Expected 'design_doc/index_name', got {path!r}")
    return f"_design/{quote(design_doc, safe='')}/_{index_type}/{quote(index_name, safe='')}"


class CouchDatabase:
    """Operations on one database of a CouchServer."""

    def __init__(self, client: HTTPClient, name: str) -> None:
        if not name:
            raise ValueError("Database name must not be empty")
        self._client = client
        self.name = name
        self._db_path = quote(name, safe="")
        self._changes = ChangesFeedController(client, self._db_path)

    @property
    def url(self) -> str:
        return self._client.url_for(self._db_path)

    def _path(self, suffix: str) -> str:
        return f"{self._db_path}/{suffix}"

    async def get(self, doc_id: str) -> dict[str, Any]:
        return await self._client.execute(self._path(doc_path(doc_id)), HTTPMethod.GET)

    async def put(self, doc: Mapping[str, Any]) -> BasicResponse:
        """Create or update a document; ``doc`` must carry ``_id``."""
        doc_id = doc.get("_id")
        if not doc_id:
            raise ValueError("Document must have an _id")
        return await self._client.execute(
            self._path(doc_path(doc_id)), HTTPMethod.PUT, dict(doc), response_model=BasicResponse
        )

    async def remove(self, doc_id: str, rev: str) -> BasicResponse:
        return await self._client.execute(
            f"{self._path(doc_path(doc_id))}?rev={quote(rev, safe='')}",
            HTTPMethod.DELETE,
            response_model=BasicResponse,
        )

    async def all_docs(self, params: AllDocsParams | Params | None = None) -> ViewResponse:
        return await self._client.execute(
            self._path("_all_docs"), HTTPMethod.POST, _body(params), response_model=ViewResponse
        )

    async def all_docs_queries(
        self, queries: Sequence[AllDocsParams | Params]
    ) -> MultipleViewResponse:
        return await self._client.execute(
            self._path("_all_docs/queries"),
            HTTPMethod.POST,
            {"queries": [_body(q) for q in queries]},
            response_model=MultipleViewResponse,
        )

    async def query(self, path: str, params: QueryParams | Params | None = None) -> ViewResponse:
        """Query a view addressed as ``"design_doc/view_name"``."""
        return await self._client.execute(
            self._path(design_path(path)), HTTPMethod.POST, _body(params), response_model=ViewResponse
        )

    async def queries(
        self, path: str, queries: Sequence[QueryParams | Params]
    ) -> MultipleViewResponse:
        return await self._client.execute(
            self._path(f"{design_path(path)}/queries"),
            HTTPMethod.POST,
            {"queries": [_body(q) for q in queries]},
            response_model=MultipleViewResponse,
        )

    async def search(self, path: str, params: SearchParams | Params) -> SearchResponse:
        """Full-text search against ``"design_doc/index_name"``."""
        return await self._client.execute(
            self._path(design_path(path, "search")),
            HTTPMethod.POST,
            _body(params),
            response_model=SearchResponse,
        )

    async def bulk_docs(self, docs: Sequence[Mapping[str, Any]]) -> BulkDocsResult:
        return await self._client.execute(
            self._path("_bulk_docs"),
            HTTPMethod.POST,
            {"docs": [dict(d) for d in docs]},
            response_model=BulkDocsResult,
        )

    async def purge_docs(self, id_revs: Mapping[str, Sequence[str]]) -> PurgeResponse:
        return await self._client.execute(
            self._path("_purge"),
            HTTPMethod.POST,
            {doc_id: list(revs) for doc_id, revs in id_revs.items()},
            response_model=PurgeResponse,
        )

    async def changes(
        self,
        mode: FeedMode | str = FeedMode.NORMAL,
        options: ChangesOptions | Params | None = None,
        on_record: RecordCallback | None = None,
    ) -> ChangesResult:
        """See ChangesFeedController.changes."""
        return await self._changes.changes(mode, options, on_record)
