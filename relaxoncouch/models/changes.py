"""Changes feed options and records."""

from __future__ import annotations

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

Seq = int | str


class ChangesOptions(BaseModel):
    """Caller-facing options for a changes request.

    ``doc_ids`` and ``selector`` travel in the JSON body; every other set
    field becomes a query parameter. Both filters are forwarded as given when
    supplied together.
    """

    BODY_FIELDS: ClassVar[frozenset[str]] = frozenset({"doc_ids", "selector"})

    since: Seq | None = None
    include_docs: bool | None = None
    descending: bool | None = None
    limit: int | None = Field(None, ge=0)
    timeout: int | None = Field(None, ge=0)
    heartbeat: int | None = Field(None, ge=0)
    conflicts: bool | None = None
    attachments: bool | None = None
    filter: str | None = None
    style: Literal["main_only", "all_docs"] | None = None
    doc_ids: list[str] | None = None
    selector: dict[str, Any] | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    def query_fields(self) -> dict[str, Any]:
        """Set fields that belong in the query string."""
        return self.model_dump(exclude_none=True, exclude=set(self.BODY_FIELDS))

    def body(self) -> dict[str, Any] | None:
        """JSON body carrying the filters, or None when neither is set."""
        if self.doc_ids is None and self.selector is None:
            return None
        return self.model_dump(exclude_none=True, include=set(self.BODY_FIELDS))


class ChangeRevision(BaseModel):
    rev: str


class ChangesFeedRecord(BaseModel):
    """One document mutation. Records carry ``seq``; headings do not."""

    seq: Seq
    id: str
    changes: list[ChangeRevision] = Field(default_factory=list)
    doc: dict[str, Any] | None = None
    deleted: bool = False

    model_config = ConfigDict(frozen=True, extra="allow")


class ChangesFeedHeading(BaseModel):
    """Terminal summary line of a feed."""

    last_seq: Seq
    pending: int | None = None

    model_config = ConfigDict(frozen=True, extra="allow")


class ChangesFeed(BaseModel):
    """Buffered feed document returned by normal and long-poll requests."""

    results: list[ChangesFeedRecord] = Field(default_factory=list)
    last_seq: Seq
    pending: int | None = None

    model_config = ConfigDict(frozen=True, extra="allow")
