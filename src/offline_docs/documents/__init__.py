"""Local document store with dirty tracking and batched sync.

Modules:

- ``models``      -- ``Document``, ``DocumentPatch``, ``FilterType``,
  ``OperationStatus``, ``OperationResult``, ``SyncReport``.
- ``store``       -- ``EntityStore``: ordered id-keyed document records.
- ``views``       -- pure derived views (all / dirty / clean / filtered).
- ``state``       -- ``DocumentsState``: serialized mutation entry point,
  active filter, per-operation status.
- ``coordinator`` -- ``DocumentService``: create and sync flows.

Usage example
-------------
::

    from offline_docs.documents import DocumentService, FilterType

    service = DocumentService(api=remote_api)
    await service.create_document("Notes", "draft", "Ann")
    service.edit_document(doc_id, {"content": "final"})

    result = await service.sync_dirty_documents()
    if result.ok:
        print(result.value.summary())
    else:
        print("sync failed:", service.state.error)
"""

from .coordinator import DocumentService
from .models import (
    Acknowledgment,
    Document,
    DocumentPatch,
    FilterType,
    OperationKind,
    OperationResult,
    OperationStatus,
    SyncReport,
)
from .state import DocumentsState
from .store import EntityStore

__all__ = [
    "Acknowledgment",
    "Document",
    "DocumentPatch",
    "DocumentService",
    "DocumentsState",
    "EntityStore",
    "FilterType",
    "OperationKind",
    "OperationResult",
    "OperationStatus",
    "SyncReport",
]
