"""Local-first document store with dirty tracking and batched sync."""

__version__ = "0.3.0"

from .documents import (
    Document,
    DocumentPatch,
    DocumentService,
    DocumentsState,
    FilterType,
    SyncReport,
)
from .errors import (
    AuthError,
    CreateError,
    NotFoundError,
    OfflineDocsError,
    RemoteError,
    SyncError,
)
from .session import SessionManager

__all__ = [
    "AuthError",
    "CreateError",
    "Document",
    "DocumentPatch",
    "DocumentService",
    "DocumentsState",
    "FilterType",
    "NotFoundError",
    "OfflineDocsError",
    "RemoteError",
    "SessionManager",
    "SyncError",
    "SyncReport",
    "__version__",
]
