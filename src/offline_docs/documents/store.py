"""Normalized in-memory entity store for documents.

Documents are held in an id-keyed dict alongside an insertion-ordered id
list. The two structures are only ever changed together, so every id in
``order`` has exactly one entry in ``by_id`` and vice versa.

Besides the documents themselves, the store keeps a per-id *revision*
counter that is bumped by every local edit and every overwrite. The sync
coordinator snapshots revisions so it can tell whether an acknowledged
document was edited again while the sync call was in flight.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

from ..errors import NotFoundError
from .models import Document, DocumentPatch, utc_now

logger = logging.getLogger(__name__)


class EntityStore:
    """Insertion-ordered collection of ``Document`` records keyed by id."""

    def __init__(self) -> None:
        self._order: list[str] = []
        self._by_id: dict[str, Document] = {}
        self._revisions: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, doc_id: str) -> Document | None:
        """Return the document for *doc_id*, or ``None`` if absent."""
        return self._by_id.get(doc_id)

    def all(self) -> Iterator[Document]:
        """Yield documents in insertion order.

        Each call returns a fresh iterator, so the sequence can be
        restarted by calling ``all()`` again.
        """
        for doc_id in self._order:
            yield self._by_id[doc_id]

    def revision(self, doc_id: str) -> int | None:
        """Return the local revision of *doc_id*, or ``None`` if absent."""
        return self._revisions.get(doc_id)

    @property
    def order(self) -> tuple[str, ...]:
        return tuple(self._order)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._by_id

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Document]:
        return self.all()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_document(self, doc: Document) -> None:
        """Insert *doc*, or overwrite the existing entry with the same id.

        An overwrite keeps the id's original position in the order.
        """
        if doc.id in self._by_id:
            logger.debug("Overwriting document %s", doc.id)
            self._revisions[doc.id] += 1
        else:
            self._order.append(doc.id)
            self._revisions[doc.id] = 0
        self._by_id[doc.id] = doc

    def edit_document(
        self, doc_id: str, patch: DocumentPatch | Mapping[str, object]
    ) -> Document:
        """Merge *patch* onto an existing document and mark it dirty.

        ``updated_at`` is taken from the patch when present, otherwise
        stamped with the current UTC time.

        Raises:
            NotFoundError: If *doc_id* is not in the store.
        """
        current = self._by_id.get(doc_id)
        if current is None:
            raise NotFoundError(doc_id)

        if not isinstance(patch, DocumentPatch):
            patch = DocumentPatch.model_validate(patch)

        changes = patch.changes()
        changes.setdefault("updated_at", utc_now())
        changes["is_dirty"] = True

        updated = current.model_copy(update=changes)
        self._by_id[doc_id] = updated
        self._revisions[doc_id] += 1
        return updated

    def mark_clean(
        self,
        doc_ids: Iterable[str],
        expected_revisions: Mapping[str, int] | None = None,
    ) -> list[str]:
        """Clear the dirty flag on each id in *doc_ids*.

        Ids not in the store are ignored. When *expected_revisions* is
        given, an id is only cleaned if its current revision still equals
        the expected one; ids missing from the mapping are skipped.

        Returns:
            The ids that were actually cleaned, in the given order.
        """
        cleaned: list[str] = []
        for doc_id in doc_ids:
            current = self._by_id.get(doc_id)
            if current is None:
                continue
            if expected_revisions is not None:
                expected = expected_revisions.get(doc_id)
                if expected is None or expected != self._revisions[doc_id]:
                    continue
            if current.is_dirty:
                self._by_id[doc_id] = current.model_copy(
                    update={"is_dirty": False}
                )
            cleaned.append(doc_id)
        return cleaned
