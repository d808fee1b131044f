from sqlalchemy import Column, String, DateTime, Text, Index
from datetime import datetime, timezone
import secrets

from .db import Base


def new_object_id() -> str:
    """24 lowercase hex characters, the same shape as a document-store object id."""
    return secrets.token_hex(12)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(String(24), primary_key=True, default=new_object_id)
    name = Column(String, nullable=False, default="")
    bio = Column(Text, nullable=False, default="")
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    # bcrypt modular-crypt string, never empty once persisted
    password_hash = Column(String, nullable=False)
    avatar = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class Story(Base):
    __tablename__ = "stories"
    id = Column(String(24), primary_key=True, default=new_object_id)
    # no FK: stories are removed explicitly when their author is deleted
    author_id = Column(String(24), nullable=False)
    title = Column(String, nullable=False)
    body = Column(Text, nullable=False, default="")
    cover = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_stories_author_id", "author_id"),
        Index("ix_stories_created_at", "created_at"),
    )

