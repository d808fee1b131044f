"""
FastAPI dependencies wiring settings, stores and services per request.
"""
from datetime import timedelta
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from .auth import AuthService
from .config import Settings, get_settings
from .db import get_db
from .errors import MalformedToken
from .passwords import PasswordHasher
from .store import SQLAlchemyCredentialStore, SQLAlchemyStoryStore
from .tokens import TokenIssuer
from .users import UserService


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


def get_token_issuer(settings: Settings = Depends(get_settings)) -> TokenIssuer:
    return TokenIssuer(
        settings.JWT_SECRET,
        lifetime=timedelta(hours=settings.TOKEN_EXPIRE_HOURS),
        algorithm=settings.JWT_ALGORITHM,
    )


def get_credential_store(db: Session = Depends(get_db)) -> SQLAlchemyCredentialStore:
    return SQLAlchemyCredentialStore(db)


def get_story_store(db: Session = Depends(get_db)) -> SQLAlchemyStoryStore:
    return SQLAlchemyStoryStore(db)


def get_auth_service(
    store: SQLAlchemyCredentialStore = Depends(get_credential_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(store, hasher, issuer)


def get_user_service(
    store: SQLAlchemyCredentialStore = Depends(get_credential_store),
    stories: SQLAlchemyStoryStore = Depends(get_story_store),
) -> UserService:
    return UserService(store, stories)


def get_current_user_id(
    issuer: TokenIssuer = Depends(get_token_issuer),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> str:
    """Verify the bearer token and return the user id it was issued for."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise MalformedToken("Not authenticated")
    token = authorization.split(" ", 1)[1].strip()
    return issuer.verify(token)
