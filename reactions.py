"""
Like/dislike rules shared by posts, stories and comments.

For one (user, target) pair the state is none, liked or disliked. Toggling the
current reaction clears it; toggling the other one moves the user across.
A user id is never in both lists.
"""
from typing import List, Literal, Tuple

Reaction = Literal["like", "dislike"]

NONE = "none"
LIKED = "liked"
DISLIKED = "disliked"


def reaction_state(likes: List[str], dislikes: List[str], user_id: str) -> str:
    if user_id in likes:
        return LIKED
    if user_id in dislikes:
        return DISLIKED
    return NONE


def apply_reaction(likes: List[str], dislikes: List[str], user_id: str, kind: Reaction) -> Tuple[List[str], List[str]]:
    """Return new (likes, dislikes); the inputs are left untouched."""
    if kind not in ("like", "dislike"):
        raise ValueError(f"unknown reaction {kind!r}")
    same, other = (likes, dislikes) if kind == "like" else (dislikes, likes)
    already = user_id in same
    same = [u for u in same if u != user_id]
    other = [u for u in other if u != user_id]
    if not already:
        same.insert(0, user_id)
    return (same, other) if kind == "like" else (other, same)
