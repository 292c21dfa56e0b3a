"""
Registration, login and self-update of users.
"""
import logging
from typing import Any, Dict

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from config import Settings
from database import create_document, find_or_404
from errors import ConflictError, InvalidCredentialsError
from profiles import ensure_profile
from schemas import LoginRequest, RegisterRequest, User, UserUpdate
from security import hash_password, sign_token, verify_password

logger = logging.getLogger(__name__)

PUBLIC_FIELDS = ("_id", "name", "email", "avatar", "date")


def public_user(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {k: doc.get(k) for k in PUBLIC_FIELDS}


def require_user(database: Database, user_id: str) -> Dict[str, Any]:
    return find_or_404(database, "user", user_id, "User")


def register(database: Database, settings: Settings, req: RegisterRequest) -> Dict[str, Any]:
    if database["user"].find_one({"email": req.email}):
        raise ConflictError("User already exists")
    creds = hash_password(req.password)
    user = User(
        name=req.name,
        email=req.email,
        avatar=None,
        password_hash=creds["hash"],
        password_salt=creds["salt"],
    )
    try:
        doc = create_document(database, "user", user)
    except DuplicateKeyError:
        raise ConflictError("User already exists")
    ensure_profile(database, doc["_id"])
    logger.info("registered user %s", doc["_id"])
    token = sign_token(doc["_id"], settings.auth_secret, settings.token_ttl_seconds)
    return {"user": public_user(doc), "token": token}


def login(database: Database, settings: Settings, req: LoginRequest) -> Dict[str, Any]:
    user = database["user"].find_one({"email": req.email})
    if not user or not verify_password(req.password, user["password_salt"], user["password_hash"]):
        logger.warning("failed login")
        raise InvalidCredentialsError()
    token = sign_token(user["_id"], settings.auth_secret, settings.token_ttl_seconds)
    return {"user": public_user(user), "token": token}


def update_user(database: Database, user_id: str, patch: UserUpdate) -> Dict[str, Any]:
    """Apply only the fields present in patch; None means leave alone."""
    require_user(database, user_id)
    changes: Dict[str, Any] = {}
    if patch.name is not None:
        changes["name"] = patch.name
    if patch.avatar is not None:
        changes["avatar"] = patch.avatar
    if patch.email is not None:
        taken = database["user"].find_one({"email": patch.email, "_id": {"$ne": user_id}})
        if taken:
            raise ConflictError("Email already in use")
        changes["email"] = patch.email
    if patch.password is not None:
        creds = hash_password(patch.password)
        changes["password_hash"] = creds["hash"]
        changes["password_salt"] = creds["salt"]
    if changes:
        try:
            database["user"].update_one({"_id": user_id}, {"$set": changes})
        except DuplicateKeyError:
            raise ConflictError("Email already in use")
    return public_user(database["user"].find_one({"_id": user_id}))
