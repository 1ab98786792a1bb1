"""Exception taxonomy for offline_docs.

Remote failures (``AuthError``, ``CreateError``, ``SyncError``) are caught
at the boundary of each async flow and recorded as status, never rethrown.
``NotFoundError`` is raised synchronously by local edits of unknown ids.
"""


class OfflineDocsError(Exception):
    """Base class for all offline_docs errors.

    Attributes:
        message: Human-readable description, suitable for display.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RemoteError(OfflineDocsError):
    """A call to the remote API failed."""


class AuthError(RemoteError):
    """Sign-in was rejected or could not be completed."""


class CreateError(RemoteError):
    """The remote API did not create the requested document."""


class SyncError(RemoteError):
    """The batched synchronization call failed."""


class NotFoundError(OfflineDocsError):
    """A local operation referenced a document id that is not in the store."""

    def __init__(self, doc_id: str) -> None:
        super().__init__(f"Document '{doc_id}' not found")
        self.doc_id = doc_id


def error_message(error: BaseException) -> str:
    """Return the display message for *error*.

    Domain errors expose ``message``; anything else falls back to
    ``str(error)`` or the exception class name when that is empty.
    """
    if isinstance(error, OfflineDocsError):
        return error.message
    return str(error) or type(error).__name__
