"""
Record stores consumed by the services.

``CredentialStore`` and ``StoryStore`` are the narrow interfaces the services
depend on; the SQLAlchemy classes below implement them. Not-found is raised
as ``NotFoundError`` and unique-index violations as ``DuplicateError``; any
other database failure surfaces as ``StoreUnavailable``.
"""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import DuplicateError, NotFoundError, StoreUnavailable
from .models import Story, User
from .schemas import UserCredential

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"name", "bio", "email", "avatar"}


class CredentialStore(ABC):
    @abstractmethod
    def insert(self, credential: UserCredential) -> str: ...

    @abstractmethod
    def find_by_id(self, user_id: str) -> UserCredential: ...

    @abstractmethod
    def find_by_email(self, email: str) -> UserCredential: ...

    @abstractmethod
    def find_by_username(self, username: str) -> UserCredential: ...

    @abstractmethod
    def find_by_username_pattern(self, pattern: str) -> List[UserCredential]:
        """Case-sensitive, unanchored regex match on username. The pattern is used as given."""

    @abstractmethod
    def update(self, user_id: str, fields: Dict[str, Any]) -> None: ...

    @abstractmethod
    def delete(self, user_id: str) -> None: ...

    @abstractmethod
    def unit_of_work(self):
        """
        Context manager grouping store calls into one transaction, rolled back
        on any error. Stores sharing the same session join it.
        """


class StoryStore(ABC):
    @abstractmethod
    def list_stories(self, limit: int, offset: int = 0) -> List[Story]: ...

    @abstractmethod
    def find_by_id(self, story_id: str) -> Story: ...

    @abstractmethod
    def delete_by_author(self, author_id: str) -> int: ...


@contextmanager
def _db_errors(db: Session, operation: str):
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateError(operation) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Store operation %s failed: %s", operation, exc)
        raise StoreUnavailable() from exc


UNIT_OF_WORK_KEY = "story_service.unit_of_work"


def _commit(db: Session) -> None:
    # inside a unit of work the outer block commits
    if db.info.get(UNIT_OF_WORK_KEY):
        db.flush()
    else:
        db.commit()


@contextmanager
def unit_of_work(db: Session):
    if db.info.get(UNIT_OF_WORK_KEY):
        yield
        return
    db.info[UNIT_OF_WORK_KEY] = True
    try:
        with _db_errors(db, "unit_of_work"):
            yield
            db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.info.pop(UNIT_OF_WORK_KEY, None)


class SQLAlchemyCredentialStore(CredentialStore):
    def __init__(self, db: Session):
        self.db = db

    def insert(self, credential: UserCredential) -> str:
        with _db_errors(self.db, "insert"):
            row = User(**credential.model_dump())
            self.db.add(row)
            self.db.commit()
            return row.id

    def _find_one(self, operation: str, criterion) -> UserCredential:
        with _db_errors(self.db, operation):
            row = self.db.query(User).filter(criterion).first()
        if row is None:
            raise NotFoundError(operation)
        return UserCredential.model_validate(row)

    def find_by_id(self, user_id: str) -> UserCredential:
        return self._find_one("find_by_id", User.id == user_id)

    def find_by_email(self, email: str) -> UserCredential:
        return self._find_one("find_by_email", User.email == email)

    def find_by_username(self, username: str) -> UserCredential:
        return self._find_one("find_by_username", User.username == username)

    def find_by_username_pattern(self, pattern: str) -> List[UserCredential]:
        with _db_errors(self.db, "find_by_username_pattern"):
            rows = (
                self.db.query(User)
                .filter(User.username.regexp_match(pattern))
                .order_by(User.username.asc())
                .all()
            )
        return [UserCredential.model_validate(row) for row in rows]

    def update(self, user_id: str, fields: Dict[str, Any]) -> None:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"fields not updatable: {', '.join(sorted(unknown))}")
        with _db_errors(self.db, "update"):
            row = self.db.query(User).filter(User.id == user_id).first()
            if row is None:
                raise NotFoundError("update")
            for key, value in fields.items():
                setattr(row, key, value)
            self.db.commit()

    def delete(self, user_id: str) -> None:
        with _db_errors(self.db, "delete"):
            deleted = self.db.query(User).filter(User.id == user_id).delete()
            _commit(self.db)
        if not deleted:
            raise NotFoundError("delete")

    def unit_of_work(self):
        return unit_of_work(self.db)


class SQLAlchemyStoryStore(StoryStore):
    def __init__(self, db: Session):
        self.db = db

    def list_stories(self, limit: int, offset: int = 0) -> List[Story]:
        with _db_errors(self.db, "list_stories"):
            return (
                self.db.query(Story)
                .order_by(Story.created_at.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )

    def find_by_id(self, story_id: str) -> Story:
        with _db_errors(self.db, "find_story"):
            story = self.db.query(Story).filter(Story.id == story_id).first()
        if story is None:
            raise NotFoundError("find_story")
        return story

    def delete_by_author(self, author_id: str) -> int:
        with _db_errors(self.db, "delete_by_author"):
            deleted = self.db.query(Story).filter(Story.author_id == author_id).delete()
            _commit(self.db)
        return deleted
