"""
Profiles and whole-account deletion.

One profile per user, created at registration (or on first write for older
accounts). `posts` and `stories` hold the owner's content ids, newest first.
"""
import logging
from typing import Any, Dict, List, Optional

from pymongo.database import Database

from cascade import Cascade
from database import USER_PUBLIC, create_document, find_or_404, populate
from errors import NotFoundError
from schemas import Profile, ProfileUpdate

logger = logging.getLogger(__name__)

POST_SUMMARY = {"title": 1, "data": 1, "date": 1}
STORY_SUMMARY = {"title": 1, "text": 1, "date": 1}

# Collections carrying likes/dislikes
REACTABLE = ("post", "story", "comment")


def ensure_profile(database: Database, user_id: str) -> Dict[str, Any]:
    profile = database["profile"].find_one({"user": user_id})
    if profile:
        return profile
    return create_document(database, "profile", Profile(user=user_id))


def _joined(database: Database, profile: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not profile:
        return profile
    populate(database, profile, "user", "user", USER_PUBLIC)
    populate(database, profile, "posts", "post", POST_SUMMARY)
    populate(database, profile, "stories", "story", STORY_SUMMARY)
    return profile


def upsert_profile(database: Database, user_id: str, patch: ProfileUpdate) -> Dict[str, Any]:
    find_or_404(database, "user", user_id, "User")
    profile = ensure_profile(database, user_id)
    changes = patch.model_dump(exclude_none=True)
    if changes:
        database["profile"].update_one({"_id": profile["_id"]}, {"$set": changes})
    return _joined(database, database["profile"].find_one({"_id": profile["_id"]}))


def get_profile_by_user(database: Database, user_id: str) -> Dict[str, Any]:
    find_or_404(database, "user", user_id, "User")
    profile = database["profile"].find_one({"user": user_id})
    if not profile:
        raise NotFoundError("Profile not found")
    return _joined(database, profile)


def get_profile(database: Database, profile_id: str) -> Dict[str, Any]:
    return _joined(database, find_or_404(database, "profile", profile_id, "Profile"))


def list_profiles(database: Database) -> List[Dict[str, Any]]:
    # TODO: paginate once clients send a cursor; every profile is returned today
    return [_joined(database, p) for p in database["profile"].find({})]


def delete_account(database: Database, user_id: str) -> None:
    """Remove a user together with everything they own or wrote.

    Order: references to the user's comments, the comments, comments others
    left on the user's content, that content, the user's reactions, the
    profile, and finally the user record.
    """
    find_or_404(database, "user", user_id, "User")
    cascade = Cascade(f"user {user_id}")

    own_comments = [c["_id"] for c in database["comment"].find({"user": user_id}, {"_id": 1})]
    post_ids = [p["_id"] for p in database["post"].find({"user": user_id}, {"_id": 1})]
    story_ids = [s["_id"] for s in database["story"].find({"user": user_id}, {"_id": 1})]

    if own_comments:
        for parent in ("post", "story"):
            cascade.step(
                f"{parent} comment references",
                database[parent].update_many,
                {"comments": {"$in": own_comments}},
                {"$pullAll": {"comments": own_comments}},
            )
    cascade.step("comments", database["comment"].delete_many, {"user": user_id})
    if post_ids:
        cascade.step("comments on posts", database["comment"].delete_many, {"post": {"$in": post_ids}})
    if story_ids:
        cascade.step("comments on stories", database["comment"].delete_many, {"story": {"$in": story_ids}})
    cascade.step("posts", database["post"].delete_many, {"user": user_id})
    cascade.step("stories", database["story"].delete_many, {"user": user_id})
    for collection in REACTABLE:
        cascade.step(
            f"{collection} reactions",
            database[collection].update_many,
            {"$or": [{"likes": user_id}, {"dislikes": user_id}]},
            {"$pull": {"likes": user_id, "dislikes": user_id}},
        )
    cascade.step("profile", database["profile"].delete_many, {"user": user_id})
    cascade.finish("user", database["user"].delete_one, {"_id": user_id})
    logger.info("deleted user %s with %d posts, %d stories, %d comments",
                user_id, len(post_ids), len(story_ids), len(own_comments))
