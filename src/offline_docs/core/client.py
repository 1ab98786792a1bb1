import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any, Protocol

import requests
from pydantic import ValidationError

from ..config import Config
from ..documents.models import Acknowledgment, Document
from ..errors import AuthError, CreateError, RemoteError, SyncError
from ..session import SessionUser
from .async_utils import run_sync

logger = logging.getLogger(__name__)


class RemoteApi(Protocol):
    """Remote authority consumed by the session and document flows.

    Each call either returns its result or raises the matching
    ``RemoteError`` subclass.
    """

    async def authenticate(self, email: str, password: str) -> SessionUser: ...

    async def create_document(
        self, title: str, content: str, author: str
    ) -> Document: ...

    async def sync_documents(
        self, documents: Sequence[Document]
    ) -> list[Acknowledgment]: ...


class ApiClient:
    """``RemoteApi`` implementation over HTTP/JSON using ``requests``.

    Blocking requests run in worker threads through ``run_sync``; each
    thread gets its own ``requests.Session``.  No retry is attempted.
    """

    def __init__(
        self,
        config: Config,
        token_provider: Callable[[], str] | None = None,
    ):
        self.config = config
        self.token_provider = token_provider
        self._thread_local = threading.local()
        self.base_url = config.api_url.rstrip("/")

    @property
    def session(self) -> requests.Session:
        """The current thread's session."""
        return self._get_session()

    def _get_session(self) -> requests.Session:
        """Get or create a thread-local requests.Session."""
        if not hasattr(self._thread_local, "session"):
            self._thread_local.session = self._create_session()
        return self._thread_local.session

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.verify = not self.config.insecure
        session.headers.update({"Accept": "application/json"})
        return session

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.token_provider() if self.token_provider else ""
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _post(
        self,
        path: str,
        payload: dict[str, Any],
        error_cls: type[RemoteError],
    ) -> Any:
        """POST *payload* as JSON and return the decoded response body.

        Transport failures, error statuses, and undecodable bodies are
        all raised as *error_cls*.
        """
        url = f"{self.base_url}{path}"
        logger.debug("POST %s", url)
        try:
            response = self._get_session().post(
                url,
                json=payload,
                headers=self._headers(),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise error_cls(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            raise error_cls(self._error_message(response))

        try:
            return response.json()
        except ValueError as e:
            raise error_cls(f"Invalid JSON response from {path}") from e

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Pick the server's error message, falling back to the status line."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("error", "message"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        reason = response.reason or "error"
        return f"HTTP {response.status_code}: {reason}"

    # ------------------------------------------------------------------
    # Blocking calls
    # ------------------------------------------------------------------

    def post_signin(self, email: str, password: str) -> SessionUser:
        body = self._post(
            "/auth/signin",
            {"email": email, "password": password},
            AuthError,
        )
        try:
            return SessionUser.model_validate(body)
        except ValidationError as e:
            raise AuthError("Malformed sign-in response") from e

    def post_document(self, title: str, content: str, author: str) -> Document:
        body = self._post(
            "/documents",
            {"title": title, "content": content, "author": author},
            CreateError,
        )
        try:
            return Document.model_validate(body)
        except ValidationError as e:
            raise CreateError("Malformed document in create response") from e

    def post_sync(self, documents: Sequence[Document]) -> list[Acknowledgment]:
        body = self._post(
            "/documents/sync",
            {"documents": [doc.to_wire() for doc in documents]},
            SyncError,
        )
        items = body.get("documents") if isinstance(body, dict) else body
        if not isinstance(items, list):
            raise SyncError("Malformed sync response: expected a list")
        try:
            return [Acknowledgment.model_validate(item) for item in items]
        except ValidationError as e:
            raise SyncError("Malformed acknowledgment in sync response") from e

    # ------------------------------------------------------------------
    # RemoteApi
    # ------------------------------------------------------------------

    async def authenticate(self, email: str, password: str) -> SessionUser:
        return await run_sync(self.post_signin, email, password)

    async def create_document(
        self, title: str, content: str, author: str
    ) -> Document:
        return await run_sync(self.post_document, title, content, author)

    async def sync_documents(
        self, documents: Sequence[Document]
    ) -> list[Acknowledgment]:
        return await run_sync(self.post_sync, list(documents))
