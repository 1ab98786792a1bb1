"""Session manager: sign-in state and the bearer token for API calls.

The session holds a token (empty string means signed out) and a user
name.  ``authenticate`` follows the same boundary rules as the document
flows: failures are recorded, never raised.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from .documents.models import OperationResult
from .errors import error_message

if TYPE_CHECKING:
    from .core.client import RemoteApi

logger = logging.getLogger(__name__)


class SessionUser(BaseModel):
    """Credentials returned by a successful sign-in."""

    token: str = ""
    user_name: str = Field(default="", alias="userName")

    model_config = {"frozen": True, "populate_by_name": True}


class SessionManager:
    """Authenticate against the remote API and expose the session.

    Args:
        api: Remote API used for ``authenticate``.  May be attached after
            construction via ``attach``, since the HTTP client in turn
            reads its token from this session.
    """

    def __init__(self, api: RemoteApi | None = None) -> None:
        self._api = api
        self._user = SessionUser()
        self._is_loading = False
        self._error: str | None = None

    def attach(self, api: RemoteApi) -> None:
        self._api = api

    @property
    def token(self) -> str:
        return self._user.token

    @property
    def user_name(self) -> str:
        return self._user.user_name

    @property
    def is_authenticated(self) -> bool:
        return self._user.token != ""

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> str | None:
        return self._error

    def token_provider(self) -> str:
        """Return the current bearer token; suitable as ``ApiClient`` callback."""
        return self._user.token

    async def authenticate(self, email: str, password: str) -> OperationResult:
        """Sign in with *email* and *password*.

        On failure the session is reset to signed out and the error
        message is kept in ``error``.
        """
        if self._api is None:
            raise RuntimeError("SessionManager has no remote API attached")

        self._is_loading = True
        self._error = None
        logger.debug("Signing in as %s", email)
        try:
            user = await self._api.authenticate(email, password)
        except Exception as e:
            message = error_message(e)
            logger.error("Sign-in failed: %s", message)
            self._user = SessionUser()
            self._error = message
            self._is_loading = False
            return OperationResult(ok=False, error=message)

        self._user = user
        self._is_loading = False
        logger.info("Signed in as %s", user.user_name or email)
        return OperationResult(ok=True, value=user)

    def sign_out(self) -> None:
        """Forget the token and user name."""
        self._user = SessionUser()
        self._error = None
        logger.info("Signed out")
