import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from bson import ObjectId
from pydantic import ValidationError
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from host_registry import db
from host_registry.config import get_settings
from host_registry.db import HostStoreError
from host_registry.models.host import Host

logger = logging.getLogger(__name__)

# Fields owned by the store, never taken from the client payload
_MANAGED_FIELDS = ("_id", "createdAt", "updatedAt")


class HostRepository:
    """
    Collection-backed access to host documents.

    All pymongo failures, and stored documents that do not form a valid Host,
    are re-raised as HostStoreError so that the API layer only has to deal
    with a single error type. A unique index violation on insert carries
    status code 409; every other failure leaves the status code unset.
    """

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    def create(self, data: Dict[str, Any]) -> Host:
        now = datetime.now(timezone.utc)
        document = {key: value for key, value in data.items() if key not in _MANAGED_FIELDS}
        document["createdAt"] = now
        document["updatedAt"] = now

        try:
            result = self._collection.insert_one(document)
        except DuplicateKeyError as exc:
            raise HostStoreError(f"Host already exists: {exc}", status_code=409) from exc
        except PyMongoError as exc:
            raise HostStoreError(f"Inserting host failed: {exc}") from exc

        document["_id"] = result.inserted_id
        try:
            return Host.model_validate(document)
        except ValidationError as exc:
            raise HostStoreError(f"Inserted host is not valid: {exc}") from exc

    def find_all(self) -> List[Host]:
        try:
            documents = list(self._collection.find())
        except PyMongoError as exc:
            raise HostStoreError(f"Fetching hosts failed: {exc}") from exc

        try:
            return [Host.model_validate(document) for document in documents]
        except ValidationError as exc:
            raise HostStoreError(f"Stored host is not valid: {exc}") from exc

    def delete_by_id(self, host_id: str) -> None:
        # Ids are exposed as strings but stored as ObjectId when the store assigned them
        key: Any = ObjectId(host_id) if ObjectId.is_valid(host_id) else host_id
        try:
            self._collection.delete_one({"_id": key})
        except PyMongoError as exc:
            raise HostStoreError(f"Deleting host {host_id} failed: {exc}") from exc


def get_host_repository() -> HostRepository:
    """
    Connect to the store and return a repository for the hosts collection.

    Raises HostStoreError if no connection can be established.
    """
    database = db.connect()
    return HostRepository(database[get_settings().hosts_collection])
