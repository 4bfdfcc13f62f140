import logging
from typing import List, Optional

from bson import ObjectId
from pymongo import MongoClient
from pymongo.database import Database as MongoDatabase
from pymongo.errors import PyMongoError

from config import Settings

logger = logging.getLogger(__name__)

USERS = "users"
SECTION_CONTROLLERS = "sectioncontrollers"
STATIONS = "stations"
TRAINS = "trains"

DEFAULT_DATABASE_NAME = "test"


class DatabaseUnavailableError(Exception):
    """Raised when a data operation runs without a configured database."""


def _to_json_value(value):
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: _to_json_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_json_value(item) for item in value]
    return value


def serialize_document(document: dict) -> dict:
    """Return a JSON-ready copy of a stored document.

    Every ObjectId is turned into its hex string, including the ``_id`` of
    embedded documents (schedule stops written by older clients carry one).
    """
    return _to_json_value(dict(document))


class Database:
    """Storage context shared by all requests.

    Wraps one ``MongoClient`` (and its connection pool) for the lifetime of
    the process. When no connection string was configured the context still
    exists, but every data operation raises ``DatabaseUnavailableError``.
    """

    def __init__(self, client: Optional[MongoClient] = None, name: str = DEFAULT_DATABASE_NAME):
        self.client = client
        self.db: Optional[MongoDatabase] = client[name] if client is not None else None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        if not settings.mongo_uri:
            logger.error("❌ Error connecting: no MongoDB connection string (set MONGODB_URI or MONGO_URI)")
            return cls()

        try:
            client = MongoClient(
                settings.mongo_uri,
                serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
            )
        except (PyMongoError, ValueError) as e:
            # Malformed URI; keep serving and fail each data request instead
            logger.error("❌ Error connecting: %s", e)
            return cls()

        name = settings.database_name
        if not name:
            name = client.get_default_database(default=DEFAULT_DATABASE_NAME).name
        return cls(client, name)

    @property
    def name(self) -> Optional[str]:
        return self.db.name if self.db is not None else None

    def _require_db(self) -> MongoDatabase:
        if self.db is None:
            raise DatabaseUnavailableError(
                "Database not available. Check MONGODB_URI (or MONGO_URI) and DATABASE_NAME environment variables."
            )
        return self.db

    def _collection(self, collection_name: str):
        return self._require_db()[collection_name]

    def ping(self) -> bool:
        """Check connectivity; failures are logged, never raised."""
        if self.db is None:
            return False
        try:
            self.client.admin.command("ping")
        except Exception as e:
            logger.error("❌ Error connecting: %s", e)
            return False
        logger.info("✅ Connected to MongoDB (database %r)", self.name)
        return True

    def list_collection_names(self) -> List[str]:
        return self._require_db().list_collection_names()

    def create_document(self, collection_name: str, data: dict) -> dict:
        """Insert a single document and return it with its ``_id`` filled in."""
        document = dict(data)
        result = self._collection(collection_name).insert_one(document)
        document["_id"] = result.inserted_id
        return document

    def insert_documents(self, collection_name: str, documents: List[dict]) -> int:
        """Bulk insert ``documents``; an empty list is a no-op.

        Returns the number of documents inserted.
        """
        collection = self._collection(collection_name)
        if not documents:
            return 0
        result = collection.insert_many([dict(d) for d in documents])
        return len(result.inserted_ids)

    def get_documents(self, collection_name: str) -> List[dict]:
        """Get every document in the collection"""
        return list(self._collection(collection_name).find({}))

    def delete_documents(self, collection_name: str) -> int:
        """Delete every document in the collection"""
        result = self._collection(collection_name).delete_many({})
        return result.deleted_count

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
