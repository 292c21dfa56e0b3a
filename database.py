"""
MongoDB access shared by the API.

`db` is None when DATABASE_URL/DATABASE_NAME are not configured; routes get
the handle through `get_db` so tests can swap in another database.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database

from config import get_settings
from errors import BadReferenceError, NotFoundError, StoreError

logger = logging.getLogger(__name__)


def _connect() -> Optional[Database]:
    settings = get_settings()
    if not settings.database_url or not settings.database_name:
        logger.warning("DATABASE_URL or DATABASE_NAME not set, store disabled")
        return None
    client = MongoClient(settings.database_url)
    return client[settings.database_name]


db = _connect()


def get_db() -> Database:
    if db is None:
        raise StoreError("Database not initialized")
    return db


def oid() -> str:
    return str(ObjectId())


def now() -> datetime:
    return datetime.now(timezone.utc)


def check_id(value: str, what: str) -> str:
    """Reject ids that could never have been issued by oid()."""
    if not ObjectId.is_valid(value):
        raise BadReferenceError(f"{what} not found")
    return value


def create_document(database: Database, collection: str, data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    doc = data.model_dump() if isinstance(data, BaseModel) else dict(data)
    doc.setdefault("_id", oid())
    if doc.get("date") is None:
        doc["date"] = now()
    database[collection].insert_one(doc)
    return doc


USER_PUBLIC = {"name": 1, "avatar": 1}


def populate(database: Database, doc: Optional[Dict[str, Any]], field: str, collection: str,
             projection: Optional[Dict[str, int]] = None) -> Optional[Dict[str, Any]]:
    """Replace the id (or id list) in doc[field] with the referenced documents.

    List order is kept; ids that no longer resolve are dropped from lists and
    become None for single references.
    """
    if not doc or field not in doc:
        return doc
    ref = doc[field]
    if isinstance(ref, list):
        found = {d["_id"]: d for d in database[collection].find({"_id": {"$in": ref}}, projection)}
        doc[field] = [found[i] for i in ref if i in found]
    elif ref is not None:
        doc[field] = database[collection].find_one({"_id": ref}, projection)
    return doc


def populate_user(database: Database, doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return populate(database, doc, "user", "user", USER_PUBLIC)


def init_indexes(database: Database) -> None:
    database["user"].create_index("email", unique=True)
    database["profile"].create_index("user")
    database["comment"].create_index("post")
    database["comment"].create_index("story")


def find_or_404(database: Database, collection: str, doc_id: str, what: str) -> Dict[str, Any]:
    check_id(doc_id, what)
    doc = database[collection].find_one({"_id": doc_id})
    if not doc:
        raise NotFoundError(f"{what} not found")
    return doc
