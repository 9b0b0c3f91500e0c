import logging
import threading
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from host_registry.config import get_settings

logger = logging.getLogger(__name__)

# Process-wide client, created on first use and reused by every request.
_client: Optional[MongoClient] = None
_client_lock = threading.Lock()


class HostStoreError(RuntimeError):
    """
    Raised when the document store cannot be reached or rejects an operation.

    status_code is an optional HTTP status the API layer should answer with;
    when it is None the API layer falls back to 500. Only errors with a
    clear client-facing meaning set it (a duplicate key on insert is 409).
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _create_client() -> MongoClient:
    settings = get_settings()
    logger.info("Opening MongoDB client for database %r", settings.mongodb_database)
    options = {"tz_aware": True}
    if settings.mongodb_timeout_ms is not None:
        options["serverSelectionTimeoutMS"] = settings.mongodb_timeout_ms
    return MongoClient(settings.mongodb_uri, **options)


def connect() -> Database:
    """
    Return the configured database, creating the shared client if needed.

    Safe to call once per request and from several threads at once: the
    client is only ever created a single time and never closed explicitly.
    Raises HostStoreError if the client cannot be configured.
    """
    global _client

    if _client is None:
        with _client_lock:
            if _client is None:
                try:
                    _client = _create_client()
                except PyMongoError as exc:
                    raise HostStoreError(
                        f"Could not connect to MongoDB: {exc}"
                    ) from exc

    return _client[get_settings().mongodb_database]
