"""
Registration and login.

``AuthService`` ties the password hasher, the credential store and the token
issuer together. It holds no mutable state of its own, so one instance can
serve any number of concurrent requests.
"""
import logging
from datetime import datetime, timezone
from typing import Tuple

from .errors import (
    Conflict,
    DuplicateError,
    InvalidCredentials,
    InvalidInput,
    NotFoundError,
    UserNotFound,
)
from .models import new_object_id
from .passwords import PasswordHasher
from .schemas import LoginRequest, RegisterRequest, UserCredential
from .store import CredentialStore
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, store: CredentialStore, hasher: PasswordHasher, issuer: TokenIssuer):
        self.store = store
        self.hasher = hasher
        self.issuer = issuer

    def register(self, request: RegisterRequest) -> UserCredential:
        """
        Create a credential from a registration request.

        Raises:
            InvalidInput: password is empty
            HashingFailure: the password backend failed
            Conflict: email or username already taken
            StoreUnavailable: the store failed
        """
        if not request.password:
            raise InvalidInput("Password is required.")

        credential = UserCredential(
            id=new_object_id(),
            name=request.name,
            bio=request.bio,
            email=request.email,
            username=request.username,
            password_hash=self.hasher.hash(request.password),
            avatar=request.avatar,
            created_at=datetime.now(timezone.utc),
        )

        try:
            self.store.insert(credential)
        except DuplicateError as exc:
            raise Conflict() from exc

        logger.info("Created user id=%s username=%s", credential.id, credential.username)
        return credential

    def login(self, request: LoginRequest) -> Tuple[UserCredential, str]:
        """
        Look the user up by email if one was given, otherwise by username,
        check the password and mint a session token.

        Raises:
            InvalidInput: neither email nor username given
            UserNotFound: no user with that email/username
            InvalidCredentials: password does not match
        """
        try:
            if request.email is not None:
                credential = self.store.find_by_email(request.email)
            elif request.username is not None:
                credential = self.store.find_by_username(request.username)
            else:
                raise InvalidInput("Email or username is required.")
        except NotFoundError as exc:
            raise UserNotFound() from exc

        if not self.hasher.verify(request.password, credential.password_hash):
            raise InvalidCredentials()

        return credential, self.issuer.issue(credential.id)
