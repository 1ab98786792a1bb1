"""Pydantic models for the document store.

Defines the data contracts shared by the store, views, and coordinator:

- ``Document``: one authority-assigned document record.
- ``DocumentPatch``: partial update applied by a local edit.
- ``FilterType``: the view filter enumeration.
- ``Acknowledgment``: one id confirmed by the remote sync call.
- ``OperationKind`` / ``OperationStatus``: per-flow busy/error bookkeeping.
- ``OperationResult``: typed outcome returned by every async flow.
- ``SyncReport``: what a single sync round trip did to the store.

All models are frozen (immutable). Wire names are camelCase; both the
alias and the Python field name are accepted on input.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


def utc_now() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


class FilterType(str, Enum):
    """Subset of documents returned by ``filtered_documents``."""

    NONE = "NONE"
    ONLY_DIRTY = "ONLY_DIRTY"
    ONLY_CLEAN = "ONLY_CLEAN"


class Document(BaseModel):
    """A document record as held in the local store.

    Attributes:
        id: Authority-assigned identifier, never reassigned.
        title: Free-form title.
        content: Free-form body text.
        author: Free-form author name.
        created_at: ISO 8601 creation timestamp, set once by the authority.
        updated_at: ISO 8601 timestamp of the last local or remote mutation.
        is_dirty: True iff the local copy differs from the last
            acknowledged authoritative copy.
    """

    id: str
    title: str = ""
    content: str = ""
    author: str = ""
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")
    is_dirty: bool = Field(default=False, alias="isDirty")

    model_config = {"frozen": True, "populate_by_name": True}

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys for the remote API."""
        return self.model_dump(by_alias=True)


class DocumentPatch(BaseModel):
    """Fields to overwrite on an existing document.

    Unset (``None``) fields are left untouched by ``edit_document``.
    """

    title: str | None = None
    content: str | None = None
    author: str | None = None
    updated_at: str | None = Field(default=None, alias="updatedAt")

    model_config = {"frozen": True, "populate_by_name": True}

    def changes(self) -> dict[str, Any]:
        """Return only the fields present in this patch."""
        return self.model_dump(exclude_none=True)


class Acknowledgment(BaseModel):
    """Authority confirmation that one document id was durably received."""

    id: str

    model_config = {"frozen": True}


class OperationKind(str, Enum):
    """Async flows that own their own busy/error status."""

    CREATE = "create"
    SYNC = "sync"


class OperationStatus(BaseModel):
    """Busy/error status of one operation kind.

    Attributes:
        kind: Which flow this status belongs to.
        generation: Incremented each time the flow starts; responses
            carrying an older generation are stale.
        outstanding: Requests of this kind still awaiting a response,
            superseded ones included.
        error: Message of the latest generation's failure, if any.
        finished_seq: Store-wide completion order, used to pick the most
            recent error across kinds.
    """

    kind: OperationKind
    generation: int = 0
    outstanding: int = 0
    error: str | None = None
    finished_seq: int = 0

    model_config = {"frozen": True}

    @property
    def in_flight(self) -> bool:
        return self.outstanding > 0


class OperationResult(BaseModel):
    """Outcome of one async flow.

    Attributes:
        ok: Whether the remote call succeeded.
        value: Flow-specific success value (``Document``, ``SyncReport``,
            or session payload).
        error: Failure message when ``ok`` is False.
        superseded: True if a newer call of the same kind started before
            this one completed, so its status update was dropped.
    """

    ok: bool
    value: Any = None
    error: str | None = None
    superseded: bool = False

    model_config = {"frozen": True}


class SyncReport(BaseModel):
    """Result of one sync round trip.

    Attributes:
        sent: Ids in the snapshot sent to the authority, in store order.
        acknowledged: Distinct ids the authority confirmed, in response order.
        cleaned: Ids whose dirty flag was cleared.
        still_dirty: Sent ids that remain dirty afterwards.
        stale: Acknowledged ids edited again while the call was in flight.
        unknown: Acknowledged ids that were not part of the snapshot.
        started_at: ISO 8601 timestamp when the snapshot was taken.
        completed_at: ISO 8601 timestamp when the response was applied.
    """

    sent: list[str] = []
    acknowledged: list[str] = []
    cleaned: list[str] = []
    still_dirty: list[str] = []
    stale: list[str] = []
    unknown: list[str] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def is_partial(self) -> bool:
        """True if some sent documents were not cleaned."""
        return bool(self.still_dirty)

    def summary(self) -> str:
        """Format a human-readable summary of the sync round trip."""
        lines = [
            "Sync report" + (" (partial)" if self.is_partial else ""),
            f"  Sent:         {len(self.sent)}",
            f"  Acknowledged: {len(self.acknowledged)}",
            f"  Cleaned:      {len(self.cleaned)}",
            f"  Still dirty:  {len(self.still_dirty)}",
            f"  Stale:        {len(self.stale)}",
            f"  Unknown:      {len(self.unknown)}",
        ]
        return "\n".join(lines)
