"""
Database Schemas for Storyhub

Each Pydantic model maps to a MongoDB collection (lowercased class name).
Ids are ObjectId strings stored in `_id`; references hold the same strings.
Request bodies live at the bottom of the module.
"""
from pydantic import BaseModel, Field, EmailStr
from typing import Optional, List, Literal, Union, Annotated
from datetime import datetime

MEDIA_CATEGORIES = ("images", "audios", "videos")
CATEGORIES = MEDIA_CATEGORIES + ("stories",)


# Post payload variants, tagged by `category`

class MediaData(BaseModel):
    category: Literal["images", "audios", "videos"]
    url: str = Field(..., min_length=1)
    description: Optional[str] = None


class StoryData(BaseModel):
    category: Literal["stories"] = "stories"
    text: str = Field(..., min_length=1)


PostData = Annotated[Union[MediaData, StoryData], Field(discriminator="category")]


# Collections

class User(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    avatar: Optional[str] = None
    password_hash: str = Field(..., description="Never returned to clients")
    password_salt: str
    date: Optional[datetime] = None


class Profile(BaseModel):
    user: str = Field(..., description="Owner (one profile per user)")
    bio: str = ""
    skills: List[str] = Field(default_factory=list)
    posts: List[str] = Field(default_factory=list, description="Newest first")
    stories: List[str] = Field(default_factory=list, description="Newest first")


class Post(BaseModel):
    user: str
    title: str = Field(..., min_length=1)
    data: PostData
    likes: List[str] = Field(default_factory=list)
    dislikes: List[str] = Field(default_factory=list)
    comments: List[str] = Field(default_factory=list)
    date: Optional[datetime] = None


class Story(BaseModel):
    user: str
    title: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    likes: List[str] = Field(default_factory=list)
    dislikes: List[str] = Field(default_factory=list)
    comments: List[str] = Field(default_factory=list)
    date: Optional[datetime] = None


class Comment(BaseModel):
    user: str
    post: Optional[str] = None
    story: Optional[str] = None
    text: str = Field(..., min_length=1)
    likes: List[str] = Field(default_factory=list)
    dislikes: List[str] = Field(default_factory=list)
    date: Optional[datetime] = None


# Request bodies

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Name is required")
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    avatar: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)


class ProfileUpdate(BaseModel):
    bio: Optional[str] = None
    skills: Optional[List[str]] = None


class PostCreate(BaseModel):
    title: Optional[str] = None
    text: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None


class PostUpdate(BaseModel):
    title: Optional[str] = None
    text: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None


class StoryCreate(BaseModel):
    title: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)


class StoryUpdate(BaseModel):
    title: Optional[str] = None
    text: Optional[str] = None


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1)
