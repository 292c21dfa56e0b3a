"""
Posts and stories.

Both are owned by a user and listed on that user's profile. Posts carry a
payload tagged by category (images, audios, videos or stories); stories are
plain title + text documents.
"""
import logging
from typing import Any, Dict, List, Optional

from pymongo.database import Database

from cascade import Cascade
from database import USER_PUBLIC, create_document, find_or_404, populate, populate_user
from errors import AuthorizationError, NotFoundError, ValidationError
from profiles import ensure_profile
from schemas import (
    CATEGORIES, MEDIA_CATEGORIES, MediaData, Post, PostCreate, PostUpdate,
    Story, StoryCreate, StoryUpdate, StoryData,
)

logger = logging.getLogger(__name__)

# kind -> (collection, profile list, comment back-reference, display name)
KINDS = {
    "post": ("post", "posts", "post", "Post"),
    "story": ("story", "stories", "story", "Story"),
}

NEWEST_FIRST = [("date", -1), ("_id", -1)]


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def require_owner(doc: Dict[str, Any], user_id: str, what: str) -> None:
    if doc.get("user") != user_id:
        logger.warning("user %s may not modify %s %s", user_id, what, doc.get("_id"))
        raise AuthorizationError()


def _with_comments(database: Database, doc: Dict[str, Any]) -> Dict[str, Any]:
    populate_user(database, doc)
    populate(database, doc, "comments", "comment")
    for comment in doc.get("comments", []):
        populate(database, comment, "user", "user", USER_PUBLIC)
    return doc


def _attach(database: Database, user_id: str, kind: str, content_id: str) -> None:
    _, listing, _, _ = KINDS[kind]
    profile = ensure_profile(database, user_id)
    database["profile"].update_one(
        {"_id": profile["_id"]},
        {"$push": {listing: {"$each": [content_id], "$position": 0}}},
    )


# Posts

def create_post(database: Database, user_id: str, category: str, req: PostCreate) -> Dict[str, Any]:
    if category not in CATEGORIES:
        raise NotFoundError(f"Unknown category {category}")
    if _blank(req.title):
        raise ValidationError("Title is required", "title")
    if category == "stories":
        if _blank(req.text):
            raise ValidationError("Text is required", "text")
        data = StoryData(text=req.text)
    else:
        if _blank(req.url):
            raise ValidationError("URL is required", "url")
        data = MediaData(category=category, url=req.url, description=req.description)
    find_or_404(database, "user", user_id, "User")

    doc = create_document(database, "post", Post(user=user_id, title=req.title, data=data))
    _attach(database, user_id, "post", doc["_id"])
    logger.info("user %s created %s post %s", user_id, category, doc["_id"])
    return populate_user(database, doc)


def list_posts(database: Database, category: Optional[str] = None) -> List[Dict[str, Any]]:
    query = {"data.category": category} if category else {}
    return [populate_user(database, p) for p in database["post"].find(query).sort(NEWEST_FIRST)]


def get_post(database: Database, post_id: str) -> Dict[str, Any]:
    return _with_comments(database, find_or_404(database, "post", post_id, "Post"))


def update_post(database: Database, post_id: str, user_id: str, patch: PostUpdate) -> Dict[str, Any]:
    post = find_or_404(database, "post", post_id, "Post")
    require_owner(post, user_id, "post")

    changes: Dict[str, Any] = {}
    if patch.title is not None:
        if _blank(patch.title):
            raise ValidationError("Title is required", "title")
        changes["title"] = patch.title
    category = post["data"]["category"]
    if category in MEDIA_CATEGORIES:
        if patch.text is not None:
            raise ValidationError(f"{category} posts have no text", "text")
        if patch.url is not None:
            if _blank(patch.url):
                raise ValidationError("URL is required", "url")
            changes["data.url"] = patch.url
        if patch.description is not None:
            changes["data.description"] = patch.description
    else:
        if patch.url is not None or patch.description is not None:
            raise ValidationError("Story posts have no media", "url")
        if patch.text is not None:
            if _blank(patch.text):
                raise ValidationError("Text is required", "text")
            changes["data.text"] = patch.text

    if changes:
        database["post"].update_one({"_id": post_id}, {"$set": changes})
    return populate_user(database, database["post"].find_one({"_id": post_id}))


# Stories

def create_story(database: Database, user_id: str, req: StoryCreate) -> Dict[str, Any]:
    if _blank(req.title):
        raise ValidationError("Title is required", "title")
    if _blank(req.text):
        raise ValidationError("Text is required", "text")
    find_or_404(database, "user", user_id, "User")

    doc = create_document(database, "story", Story(user=user_id, title=req.title, text=req.text))
    _attach(database, user_id, "story", doc["_id"])
    logger.info("user %s created story %s", user_id, doc["_id"])
    return populate_user(database, doc)


def list_stories(database: Database) -> List[Dict[str, Any]]:
    return [populate_user(database, s) for s in database["story"].find({}).sort(NEWEST_FIRST)]


def get_story(database: Database, story_id: str) -> Dict[str, Any]:
    return _with_comments(database, find_or_404(database, "story", story_id, "Story"))


def update_story(database: Database, story_id: str, user_id: str, patch: StoryUpdate) -> Dict[str, Any]:
    story = find_or_404(database, "story", story_id, "Story")
    require_owner(story, user_id, "story")
    changes = {}
    for field in ("title", "text"):
        value = getattr(patch, field)
        if value is None:
            continue
        if _blank(value):
            raise ValidationError(f"{field.capitalize()} is required", field)
        changes[field] = value
    if changes:
        database["story"].update_one({"_id": story_id}, {"$set": changes})
    return populate_user(database, database["story"].find_one({"_id": story_id}))


# Shared delete

def delete_content(database: Database, kind: str, content_id: str, user_id: str) -> None:
    """Unlist from the owner's profile, drop its comments, then the document."""
    collection, listing, backref, what = KINDS[kind]
    doc = find_or_404(database, collection, content_id, what)
    require_owner(doc, user_id, kind)

    cascade = Cascade(f"{kind} {content_id}")
    cascade.step("profile reference", database["profile"].update_many,
                 {"user": doc["user"]}, {"$pull": {listing: content_id}})
    cascade.step("comments", database["comment"].delete_many, {backref: content_id})
    cascade.finish(kind, database[collection].delete_one, {"_id": content_id})
