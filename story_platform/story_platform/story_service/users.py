import logging
import re
from typing import List

from .errors import Conflict, DuplicateError, InvalidInput, NotFoundError, UserNotFound
from .schemas import PublicProfile, UserUpdate
from .store import CredentialStore, StoryStore

logger = logging.getLogger(__name__)


class UserService:
    """Profile reads and edits, account deletion and username search."""

    def __init__(self, store: CredentialStore, stories: StoryStore):
        self.store = store
        self.stories = stories

    def get_profile(self, user_id: str) -> PublicProfile:
        try:
            credential = self.store.find_by_id(user_id)
        except NotFoundError as exc:
            raise UserNotFound() from exc
        return PublicProfile.model_validate(credential)

    def update_profile(self, user_id: str, update: UserUpdate) -> None:
        fields = update.model_dump(exclude_unset=True, exclude_none=True)
        if not fields:
            raise InvalidInput("Nothing to update.")
        try:
            self.store.update(user_id, fields)
        except NotFoundError as exc:
            raise UserNotFound() from exc
        except DuplicateError as exc:
            raise Conflict() from exc

    def delete_user(self, user_id: str) -> int:
        """
        Delete the user and every story they authored in one transaction.
        Returns the number of stories removed. If either step fails nothing
        is deleted.
        """
        try:
            with self.store.unit_of_work():
                self.store.delete(user_id)
                removed = self.stories.delete_by_author(user_id)
        except NotFoundError as exc:
            raise UserNotFound() from exc
        logger.info("Removed user id=%s and %s stories", user_id, removed)
        return removed

    def search(self, pattern: str) -> List[PublicProfile]:
        """
        Profiles whose username matches ``pattern``, used as a regex without
        escaping.

        The pattern is checked with Python's ``re`` and then run in the
        database's own regex dialect (Python ``re`` on SQLite, POSIX on
        PostgreSQL). A pattern valid in one but not the other passes the check
        and fails in the store as ``StoreUnavailable``.
        """
        try:
            re.compile(pattern)
        except re.error as exc:
            raise InvalidInput("Invalid search pattern.") from exc
        return [PublicProfile.model_validate(c) for c in self.store.find_by_username_pattern(pattern)]
