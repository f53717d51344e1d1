"""Request parameters and response documents for database operations."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Params(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class AllDocsParams(_Params):
    keys: list[str] | None = None
    startkey: str | None = None
    endkey: str | None = None
    skip: int | None = Field(None, ge=0)
    limit: int | None = Field(None, ge=0)
    include_docs: bool | None = None
    descending: bool | None = None


class QueryParams(_Params):
    key: Any = None
    keys: list[Any] | None = None
    skip: int | None = Field(None, ge=0)
    limit: int | None = Field(None, ge=0)
    startkey: Any = None
    endkey: Any = None
    include_docs: bool | None = None
    descending: bool | None = None
    reduce: bool | None = None
    group: bool | None = None


class SearchParams(_Params):
    query: str = Field(..., min_length=1)
    limit: int | None = Field(None, ge=0)
    include_docs: bool | None = None
    bookmark: str | None = None


class _Response(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")


class BasicResponse(_Response):
    """Acknowledgement for a single document write."""

    id: str
    rev: str
    ok: bool = True


class BasicErrorResponse(_Response):
    """Per-document failure inside a bulk write."""

    id: str | None = None
    error: str
    reason: str | None = None


class ViewRow(_Response):
    id: str | None = None
    key: Any = None
    value: Any = None
    doc: dict[str, Any] | None = None
    error: str | None = None


class ViewResponse(_Response):
    total_rows: int | None = None
    offset: int | None = None
    rows: list[ViewRow] = Field(default_factory=list)


class MultipleViewResponse(_Response):
    results: list[ViewResponse] = Field(default_factory=list)


class SearchRow(_Response):
    id: str
    order: Any = None
    fields: Any = None
    doc: dict[str, Any] | None = None


class SearchResponse(_Response):
    total_rows: int
    bookmark: str | None = None
    rows: list[SearchRow] = Field(default_factory=list)


class PurgeResponse(_Response):
    purge_seq: Any = None
    purged: dict[str, list[str]] = Field(default_factory=dict)


class SearchAnalyzeResponse(_Response):
    tokens: list[str] = Field(default_factory=list)


BulkDocsResult = list[BasicResponse | BasicErrorResponse]
