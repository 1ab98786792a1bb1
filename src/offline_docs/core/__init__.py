"""Remote API access shared by the session and document flows."""

from .async_utils import run_sync
from .client import ApiClient, RemoteApi

__all__ = ["ApiClient", "RemoteApi", "run_sync"]
