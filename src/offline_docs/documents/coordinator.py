"""Create and sync flows between the local store and the remote authority.

``DocumentService`` owns two async flows:

1. **Create** -- ask the authority to create a document, then add the
   returned record (with its assigned id) to the store as clean.
2. **Sync** -- snapshot the dirty documents, send them in one batched
   call, and clear the dirty flag of every acknowledged id.

Snapshot and acknowledgment handling
------------------------------------
The snapshot is taken before the remote call and records each document's
local revision.  Edits that land while the call is in flight are applied
to the store immediately.  When the acknowledgment arrives, an id is only
cleaned if its revision is unchanged, so a document edited mid-flight
stays dirty and is picked up by the next sync.  With
``fence_stale_acks=False`` every acknowledged id present in the store is
cleaned unconditionally instead.

Ids that were sent but not acknowledged stay dirty; a partial
acknowledgment is a normal outcome, not an error.

Error handling is per-flow: any failure of the remote call is caught
here, recorded in that flow's ``OperationStatus``, and returned as a
failed ``OperationResult``.  No flow retries.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from ..errors import error_message
from .models import (
    Document,
    DocumentPatch,
    OperationKind,
    OperationResult,
    SyncReport,
    utc_now,
)
from .state import DocumentsState

if TYPE_CHECKING:
    from ..core.client import RemoteApi

logger = logging.getLogger(__name__)


class DocumentService:
    """Run the create and sync flows against a ``RemoteApi``.

    Args:
        api: Remote authority.
        state: Document state to mutate.  A fresh one is created if
            omitted.
        fence_stale_acks: Skip acknowledgments for documents edited
            while the sync call was in flight.
    """

    def __init__(
        self,
        api: RemoteApi,
        state: DocumentsState | None = None,
        fence_stale_acks: bool = True,
    ) -> None:
        self.api = api
        self.state = state if state is not None else DocumentsState()
        self.fence_stale_acks = fence_stale_acks

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_document(
        self, title: str, content: str = "", author: str = ""
    ) -> OperationResult:
        """Create a document remotely and add the authoritative record."""
        generation = self.state.begin(OperationKind.CREATE)
        logger.debug("Creating document %r", title)

        try:
            created = await self.api.create_document(title, content, author)
        except Exception as e:
            return self._fail(OperationKind.CREATE, generation, e)

        document = created
        if created.is_dirty:
            document = created.model_copy(update={"is_dirty": False})
        self.state.add_document(document)
        logger.info("Created document %s", document.id)

        current = self.state.finish(OperationKind.CREATE, generation)
        return OperationResult(
            ok=True, value=document, superseded=not current
        )

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    async def sync_dirty_documents(self) -> OperationResult:
        """Send every dirty document and clean the acknowledged ones.

        Returns:
            ``OperationResult`` whose ``value`` is a ``SyncReport`` on
            success.
        """
        generation = self.state.begin(OperationKind.SYNC)
        started_at = utc_now()
        snapshot, revisions = self.state.snapshot_dirty()
        sent = [doc.id for doc in snapshot]
        logger.debug("Syncing %d dirty document(s)", len(sent))

        try:
            acks = await self.api.sync_documents(snapshot)
        except Exception as e:
            return self._fail(OperationKind.SYNC, generation, e)

        acknowledged = list(dict.fromkeys(ack.id for ack in acks))
        report = self._apply_acknowledgments(
            sent, acknowledged, revisions, started_at
        )

        current = self.state.finish(OperationKind.SYNC, generation)
        return OperationResult(ok=True, value=report, superseded=not current)

    def _apply_acknowledgments(
        self,
        sent: list[str],
        acknowledged: list[str],
        revisions: dict[str, int],
        started_at: str,
    ) -> SyncReport:
        store = self.state.store
        sent_set = set(sent)
        unknown = [i for i in acknowledged if i not in sent_set]
        stale = [
            i
            for i in acknowledged
            if i in sent_set and store.revision(i) != revisions[i]
        ]

        if self.fence_stale_acks:
            if unknown:
                logger.warning(
                    "Ignoring acknowledgment for unsent document(s): %s",
                    ", ".join(unknown),
                )
            cleaned = self.state.mark_clean(
                [i for i in acknowledged if i in sent_set], revisions
            )
            if stale:
                logger.warning(
                    "Document(s) edited during sync remain dirty: %s",
                    ", ".join(stale),
                )
        else:
            cleaned = self.state.mark_clean(acknowledged)
            if stale:
                logger.warning(
                    "Cleaned document(s) edited during sync: %s",
                    ", ".join(stale),
                )

        cleaned_set = set(cleaned)
        still_dirty = [
            i for i in sent if (doc := self.state.get(i)) and doc.is_dirty
        ]
        logger.info(
            "Sync acknowledged %d of %d document(s); %d still dirty",
            len(cleaned_set & sent_set),
            len(sent),
            len(still_dirty),
        )
        return SyncReport(
            sent=sent,
            acknowledged=acknowledged,
            cleaned=cleaned,
            still_dirty=still_dirty,
            stale=stale,
            unknown=unknown,
            started_at=started_at,
            completed_at=utc_now(),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fail(
        self, kind: OperationKind, generation: int, error: Exception
    ) -> OperationResult:
        message = error_message(error)
        logger.error("%s failed: %s", kind.value.capitalize(), message)
        current = self.state.finish(kind, generation, error=message)
        return OperationResult(ok=False, error=message, superseded=not current)

    def edit_document(
        self, doc_id: str, patch: DocumentPatch | Mapping[str, object]
    ) -> Document:
        """Apply a local edit; raises ``NotFoundError`` for unknown ids."""
        return self.state.edit_document(doc_id, patch)
