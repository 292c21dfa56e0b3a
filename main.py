import logging
from contextlib import asynccontextmanager
from typing import Optional, List, Dict, Any

from fastapi import FastAPI, Depends, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError

import accounts
import content
import database as store
import interactions
import profiles
from config import Settings, get_settings
from database import get_db
from errors import ServiceError
from schemas import (
    CATEGORIES, CommentCreate, LoginRequest, PostCreate, PostUpdate,
    ProfileUpdate, RegisterRequest, StoryCreate, StoryUpdate, UserUpdate,
)
from security import authenticate

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("storyhub")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if store.db is not None:
        store.init_indexes(store.db)
    yield


app = FastAPI(title="Storyhub API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------- Errors ----------------------
@app.exception_handler(ServiceError)
async def service_error(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.msg)
    return JSONResponse(status_code=exc.status_code, content=exc.body())


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    errors = [{"msg": e["msg"], "param": str(e["loc"][-1])} for e in exc.errors()]
    return JSONResponse(status_code=422, content={"errors": errors})


@app.exception_handler(PyMongoError)
async def store_error(request: Request, exc: PyMongoError):
    logger.error("%s %s: store failure", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"msg": "Server error"})


# ---------------------- Auth dependency ----------------------
def current_user_id(
    x_auth_token: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> str:
    token = x_auth_token
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1]
    return authenticate(token, settings.auth_secret)


# ---------------------- Users & Auth ----------------------
@app.post("/api/users")
def register(req: RegisterRequest, db: Database = Depends(get_db), settings: Settings = Depends(get_settings)):
    return accounts.register(db, settings, req)


@app.put("/api/users")
def update_user(patch: UserUpdate, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return {"user": accounts.update_user(db, user_id, patch)}


@app.post("/api/auth")
def login(req: LoginRequest, db: Database = Depends(get_db), settings: Settings = Depends(get_settings)):
    return accounts.login(db, settings, req)


@app.get("/api/auth")
def me(user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return {"user": accounts.public_user(accounts.require_user(db, user_id))}


# ---------------------- Profiles ----------------------
@app.get("/api/profiles")
def list_profiles(db: Database = Depends(get_db)):
    return profiles.list_profiles(db)


@app.get("/api/profiles/me")
def my_profile(user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return profiles.get_profile_by_user(db, user_id)


@app.get("/api/profiles/users/{owner_id}")
def profile_by_user(owner_id: str, db: Database = Depends(get_db)):
    return profiles.get_profile_by_user(db, owner_id)


@app.get("/api/profiles/{profile_id}")
def profile_by_id(profile_id: str, db: Database = Depends(get_db)):
    return profiles.get_profile(db, profile_id)


@app.post("/api/profiles")
@app.put("/api/profiles")
def upsert_profile(patch: ProfileUpdate, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return profiles.upsert_profile(db, user_id, patch)


@app.delete("/api/profiles")
def delete_account(user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    profiles.delete_account(db, user_id)
    return {"msg": "User has been deleted"}


# ---------------------- Posts ----------------------
@app.get("/api/posts")
def list_posts(db: Database = Depends(get_db)):
    return content.list_posts(db)


@app.get("/api/posts/{key}")
def get_posts(key: str, db: Database = Depends(get_db)):
    """`key` is either a category name or a post id."""
    if key in CATEGORIES:
        return content.list_posts(db, key)
    return content.get_post(db, key)


@app.post("/api/posts/{category}")
def create_post(category: str, req: PostCreate, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return content.create_post(db, user_id, category, req)


@app.put("/api/posts/like/{post_id}")
def like_post(post_id: str, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return interactions.toggle_reaction(db, "like", "post", post_id, user_id)


@app.put("/api/posts/dislike/{post_id}")
def dislike_post(post_id: str, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return interactions.toggle_reaction(db, "dislike", "post", post_id, user_id)


@app.put("/api/posts/{post_id}")
def update_post(post_id: str, patch: PostUpdate, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return content.update_post(db, post_id, user_id, patch)


@app.delete("/api/posts/{post_id}")
def delete_post(post_id: str, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    content.delete_content(db, "post", post_id, user_id)
    return {"msg": "Post has been deleted"}


# ---------------------- Stories ----------------------
@app.get("/api/stories")
def list_stories(db: Database = Depends(get_db)):
    return content.list_stories(db)


@app.get("/api/stories/{story_id}")
def get_story(story_id: str, db: Database = Depends(get_db)):
    return content.get_story(db, story_id)


@app.post("/api/stories")
def create_story(req: StoryCreate, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return content.create_story(db, user_id, req)


@app.put("/api/stories/like/{story_id}")
def like_story(story_id: str, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return interactions.toggle_reaction(db, "like", "story", story_id, user_id)


@app.put("/api/stories/dislike/{story_id}")
def dislike_story(story_id: str, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return interactions.toggle_reaction(db, "dislike", "story", story_id, user_id)


@app.put("/api/stories/{story_id}")
def update_story(story_id: str, patch: StoryUpdate, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return content.update_story(db, story_id, user_id, patch)


@app.delete("/api/stories/{story_id}")
def delete_story(story_id: str, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    content.delete_content(db, "story", story_id, user_id)
    return {"msg": "Story has been deleted"}


# ---------------------- Comments ----------------------
@app.get("/api/comments/posts/{post_id}")
def post_comments(post_id: str, db: Database = Depends(get_db)):
    return interactions.list_comments(db, "post", post_id)


@app.post("/api/comments/posts/{post_id}")
def comment_post(post_id: str, data: CommentCreate, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return interactions.add_comment(db, "post", post_id, user_id, data.text)


@app.get("/api/comments/stories/{story_id}")
def story_comments(story_id: str, db: Database = Depends(get_db)):
    return interactions.list_comments(db, "story", story_id)


@app.post("/api/comments/stories/{story_id}")
def comment_story(story_id: str, data: CommentCreate, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return interactions.add_comment(db, "story", story_id, user_id, data.text)


@app.put("/api/comments/like/{comment_id}")
def like_comment(comment_id: str, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return interactions.toggle_reaction(db, "like", "comment", comment_id, user_id)


@app.put("/api/comments/dislike/{comment_id}")
def dislike_comment(comment_id: str, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return interactions.toggle_reaction(db, "dislike", "comment", comment_id, user_id)


@app.put("/api/comments/{comment_id}")
def edit_comment(comment_id: str, data: CommentCreate, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    return interactions.edit_comment(db, comment_id, user_id, data.text)


@app.delete("/api/comments/{comment_id}")
def delete_comment(comment_id: str, user_id: str = Depends(current_user_id), db: Database = Depends(get_db)):
    interactions.delete_comment(db, comment_id, user_id)
    return {"msg": "Comment has been removed"}


# ---------------------- Health/Test ----------------------
@app.get("/")
def read_root():
    return {"message": "Hello from the other side"}


@app.get("/test")
def test_database(settings: Settings = Depends(get_settings)):
    response: Dict[str, Any] = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if settings.database_url else "❌ Not Set",
        "database_name": "✅ Set" if settings.database_name else "❌ Not Set",
        "connection_status": "Not Connected",
        "collections": [],
    }
    if store.db is None:
        return response
    try:
        collections: List[str] = store.db.list_collection_names()
        response["collections"] = collections[:10]
        response["connection_status"] = "Connected"
        response["database"] = "✅ Connected & Working"
    except PyMongoError as e:
        logger.warning("database health check failed: %s", e)
        response["database"] = f"⚠️ Connected but Error: {str(e)[:50]}"
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
