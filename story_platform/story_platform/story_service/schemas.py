from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserCredential(BaseModel):
    """Stored user identity, including the password hash. Never returned as-is."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str = ""
    bio: str = ""
    email: str
    username: str
    password_hash: str
    avatar: str = ""
    created_at: datetime


# Requests

class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    bio: str = ""
    email: str = Field(..., min_length=1, max_length=255)
    password: str
    username: str = Field(..., min_length=1, max_length=64)
    avatar: str = ""


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = None
    username: Optional[str] = None
    password: str


class UserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    bio: Optional[str] = None
    email: Optional[str] = Field(None, min_length=1, max_length=255)
    avatar: Optional[str] = None


# Responses

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    bio: str
    email: str
    username: str
    avatar: str
    created_at: datetime


class PublicProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    bio: str
    avatar: str


class LoginResponse(BaseModel):
    user: UserOut
    token: str


class StoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    author_id: str
    title: str
    body: str
    cover: str
    created_at: datetime


class MessageResponse(BaseModel):
    message: str
