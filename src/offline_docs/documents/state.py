"""Owned state for the document store.

``DocumentsState`` is the single entry point for every mutation of the
document collection, the active filter, and per-operation status.  All
mutating methods are synchronous and hold one re-entrant lock for their
whole body, so no mutation is ever observed half-applied, whether callers
live on the event loop or in worker threads.

Busy/error bookkeeping is tracked per ``OperationKind`` rather than in a
single shared flag.  Each start of an operation bumps that kind's
generation; a completion that carries an older generation is dropped, so
an early-issued request that answers late can neither clear the busy
flag of a newer request nor overwrite its error.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping

from .models import (
    Document,
    DocumentPatch,
    FilterType,
    OperationKind,
    OperationStatus,
)
from .store import EntityStore
from . import views

logger = logging.getLogger(__name__)


class DocumentsState:
    """Document store, active filter, and per-operation status."""

    def __init__(self, store: EntityStore | None = None) -> None:
        self._lock = threading.RLock()
        self._store = store if store is not None else EntityStore()
        self._filter = FilterType.NONE
        self._status: dict[OperationKind, OperationStatus] = {
            kind: OperationStatus(kind=kind) for kind in OperationKind
        }
        self._finish_seq = 0

    @property
    def store(self) -> EntityStore:
        return self._store

    # ------------------------------------------------------------------
    # Filter
    # ------------------------------------------------------------------

    @property
    def filter(self) -> FilterType:
        return self._filter

    def set_filter(self, value: object) -> bool:
        """Set the active filter if *value* names a ``FilterType``.

        Anything else is ignored and the current filter is kept.

        Returns:
            True if the filter was updated.
        """
        try:
            new_filter = FilterType(value)
        except (ValueError, TypeError):
            logger.debug("Ignoring invalid filter value: %r", value)
            return False
        with self._lock:
            self._filter = new_filter
        return True

    # ------------------------------------------------------------------
    # Document mutations
    # ------------------------------------------------------------------

    def add_document(self, doc: Document) -> None:
        with self._lock:
            self._store.add_document(doc)

    def edit_document(
        self, doc_id: str, patch: DocumentPatch | Mapping[str, object]
    ) -> Document:
        """Apply a local edit; see ``EntityStore.edit_document``."""
        with self._lock:
            return self._store.edit_document(doc_id, patch)

    def mark_clean(
        self,
        doc_ids: Iterable[str],
        expected_revisions: Mapping[str, int] | None = None,
    ) -> list[str]:
        with self._lock:
            return self._store.mark_clean(doc_ids, expected_revisions)

    def snapshot_dirty(self) -> tuple[list[Document], dict[str, int]]:
        """Capture the dirty documents and their revisions atomically."""
        with self._lock:
            dirty = views.dirty_documents(self._store)
            revisions = {
                doc.id: self._store.revision(doc.id) or 0 for doc in dirty
            }
        return dirty, revisions

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def get(self, doc_id: str) -> Document | None:
        return self._store.get(doc_id)

    def all_documents(self) -> list[Document]:
        with self._lock:
            return views.all_documents(self._store)

    def dirty_documents(self) -> list[Document]:
        with self._lock:
            return views.dirty_documents(self._store)

    def clean_documents(self) -> list[Document]:
        with self._lock:
            return views.clean_documents(self._store)

    def filtered_documents(self) -> list[Document]:
        with self._lock:
            return views.filtered_documents(self._store, self._filter)

    def counts(self) -> dict[str, int]:
        with self._lock:
            return views.document_counts(self._store, self._filter)

    # ------------------------------------------------------------------
    # Operation status
    # ------------------------------------------------------------------

    def begin(self, kind: OperationKind) -> int:
        """Mark *kind* as in flight and clear its error.

        Returns:
            The generation number the caller must pass to ``finish``.
        """
        with self._lock:
            current = self._status[kind]
            generation = current.generation + 1
            self._status[kind] = current.model_copy(
                update={
                    "generation": generation,
                    "outstanding": current.outstanding + 1,
                    "error": None,
                }
            )
        return generation

    def finish(
        self,
        kind: OperationKind,
        generation: int,
        error: str | None = None,
    ) -> bool:
        """Record the terminal state of one operation.

        Every call lowers the outstanding count of *kind*.  Only the
        current generation records its error and completion order.

        Returns:
            False if *generation* was superseded by a newer ``begin`` of
            the same kind.
        """
        with self._lock:
            current = self._status[kind]
            outstanding = max(current.outstanding - 1, 0)
            if generation != current.generation:
                self._status[kind] = current.model_copy(
                    update={"outstanding": outstanding}
                )
                logger.debug(
                    "Dropping stale %s completion (generation %d, current %d)",
                    kind.value,
                    generation,
                    current.generation,
                )
                return False
            self._finish_seq += 1
            self._status[kind] = current.model_copy(
                update={
                    "outstanding": outstanding,
                    "error": error,
                    "finished_seq": self._finish_seq,
                }
            )
        return True

    def status(self, kind: OperationKind) -> OperationStatus:
        return self._status[kind]

    @property
    def is_loading(self) -> bool:
        """True while any request of any kind awaits its response."""
        return any(s.in_flight for s in self._status.values())

    @property
    def error(self) -> str | None:
        """Message of the most recently finished failing operation."""
        failed = [s for s in self._status.values() if s.error is not None]
        if not failed:
            return None
        return max(failed, key=lambda s: s.finished_seq).error
