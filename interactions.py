"""
Comments on posts and stories, and likes/dislikes on all three.
"""
import logging
from typing import Any, Dict, List

from pymongo.database import Database

from cascade import Cascade
from content import KINDS, NEWEST_FIRST, require_owner
from database import USER_PUBLIC, create_document, find_or_404, populate
from errors import ValidationError
from reactions import Reaction, apply_reaction
from schemas import Comment

logger = logging.getLogger(__name__)

TARGETS = {"post": "Post", "story": "Story", "comment": "Comment"}


def _check_text(text: str) -> None:
    if text is None or not text.strip():
        raise ValidationError("Text is required", "text")


def _parent_of(comment: Dict[str, Any]):
    if comment.get("post"):
        return "post", comment["post"]
    return "story", comment["story"]


def list_comments(database: Database, kind: str, parent_id: str) -> List[Dict[str, Any]]:
    collection, _, backref, what = KINDS[kind]
    find_or_404(database, collection, parent_id, what)
    comments = database["comment"].find({backref: parent_id}).sort(NEWEST_FIRST)
    return [populate(database, c, "user", "user", USER_PUBLIC) for c in comments]


def add_comment(database: Database, kind: str, parent_id: str, user_id: str, text: str) -> List[Dict[str, Any]]:
    _check_text(text)
    collection, _, backref, what = KINDS[kind]
    find_or_404(database, collection, parent_id, what)
    find_or_404(database, "user", user_id, "User")

    comment = create_document(database, "comment", Comment(user=user_id, text=text, **{backref: parent_id}))
    database[collection].update_one(
        {"_id": parent_id},
        {"$push": {"comments": {"$each": [comment["_id"]], "$position": 0}}},
    )
    logger.info("user %s commented on %s %s", user_id, kind, parent_id)
    return list_comments(database, kind, parent_id)


def edit_comment(database: Database, comment_id: str, user_id: str, text: str) -> List[Dict[str, Any]]:
    _check_text(text)
    comment = find_or_404(database, "comment", comment_id, "Comment")
    require_owner(comment, user_id, "comment")
    database["comment"].update_one({"_id": comment_id}, {"$set": {"text": text}})
    return list_comments(database, *_parent_of(comment))


def delete_comment(database: Database, comment_id: str, user_id: str) -> None:
    comment = find_or_404(database, "comment", comment_id, "Comment")
    require_owner(comment, user_id, "comment")
    kind, parent_id = _parent_of(comment)

    cascade = Cascade(f"comment {comment_id}")
    cascade.step(f"{kind} reference", database[kind].update_one,
                 {"_id": parent_id}, {"$pull": {"comments": comment_id}})
    cascade.finish("comment", database["comment"].delete_one, {"_id": comment_id})


def toggle_reaction(database: Database, kind: Reaction, target: str, target_id: str, user_id: str) -> List[str]:
    """Flip `kind` for user on a post, story or comment; returns that side's ids."""
    doc = find_or_404(database, target, target_id, TARGETS[target])
    find_or_404(database, "user", user_id, "User")
    likes, dislikes = apply_reaction(doc.get("likes", []), doc.get("dislikes", []), user_id, kind)
    database[target].update_one({"_id": target_id}, {"$set": {"likes": likes, "dislikes": dislikes}})
    return likes if kind == "like" else dislikes
