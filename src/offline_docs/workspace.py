"""Composition root wiring config, API client, session, and documents."""

from __future__ import annotations

import logging
from typing import Any

from dotenv import load_dotenv

from .config import Config
from .config_loader import discover_config_files, load_hierarchical_config
from .config_schema import build_config, to_config
from .core.client import ApiClient, RemoteApi
from .documents import DocumentService, DocumentsState, OperationResult
from .logger import setup_logging
from .session import SessionManager

logger = logging.getLogger(__name__)


class Workspace:
    """One signed-in user's view of the document store.

    Owns a ``SessionManager`` and a ``DocumentService`` that share one
    ``RemoteApi``.  The store lives for as long as the workspace does.

    Args:
        api: Remote authority used by both session and documents.
        session: Session whose token the API sends.  Created if omitted.
        fence_stale_acks: See ``DocumentService``.
    """

    def __init__(
        self,
        api: RemoteApi,
        session: SessionManager | None = None,
        fence_stale_acks: bool = True,
    ) -> None:
        self.api = api
        self.session = session or SessionManager()
        self.session.attach(api)
        self.documents = DocumentService(
            api, DocumentsState(), fence_stale_acks=fence_stale_acks
        )

    @classmethod
    def from_config(cls, config: Config) -> Workspace:
        """Build a workspace talking HTTP to ``config.api_url``."""
        session = SessionManager()
        client = ApiClient(config, token_provider=session.token_provider)
        return cls(client, session, fence_stale_acks=config.fence_stale_acks)

    @classmethod
    def from_environment(
        cls,
        overrides: dict[str, Any] | None = None,
        configure_logging: bool = True,
    ) -> Workspace:
        """Resolve configuration from all sources and build a workspace.

        Loads .env first so YAML ``${VAR}`` interpolation and env lookups
        can see its values, then YAML files, then applies *overrides*.

        Raises:
            ValueError: If the configuration is missing or invalid.
        """
        load_dotenv()

        unified = build_config(load_hierarchical_config())
        config = to_config(unified, overrides)

        if configure_logging:
            setup_logging(
                debug=config.debug,
                log_file=unified.logging.file,
                debug_format=unified.logging.format,
                level=unified.logging.level,
            )

        config_files = discover_config_files()
        source = f"config file: {config_files[0]}" if config_files else "environment"
        logger.info("Configuration loaded from: %s", source)
        logger.info("API URL: %s", config.api_url)

        return cls.from_config(config)

    @property
    def state(self) -> DocumentsState:
        return self.documents.state

    async def sign_in(self, email: str, password: str) -> OperationResult:
        return await self.session.authenticate(email, password)

    def sign_out(self) -> None:
        self.session.sign_out()
