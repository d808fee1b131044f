"""
Password hashing and verification.

bcrypt through passlib: every hash embeds a fresh random salt and the work
factor it was made with, and verification compares in constant time.
"""
import logging

from passlib.context import CryptContext
from passlib.exc import PasslibSecurityError, PasswordValueError

from .errors import HashingFailure, InvalidInput

logger = logging.getLogger(__name__)

MIN_ROUNDS = 10
DEFAULT_ROUNDS = 14
# bcrypt ignores everything past this many bytes
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        if rounds < MIN_ROUNDS:
            raise ValueError(f"bcrypt rounds must be at least {MIN_ROUNDS}, got {rounds}")
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """
        Raises:
            InvalidInput: password has a NUL byte or is longer than 72 UTF-8 bytes
            HashingFailure: the bcrypt backend failed
        """
        if "\x00" in password:
            raise InvalidInput("Password must not contain NUL characters.")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise InvalidInput(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
        try:
            return self._context.hash(password)
        except PasswordValueError as exc:
            raise InvalidInput("Password is not acceptable.") from exc
        except (MemoryError, OSError, PasslibSecurityError) as exc:
            logger.error("Password hashing failed: %s", type(exc).__name__)
            raise HashingFailure() from exc

    def verify(self, password: str, hashed_password: str) -> bool:
        """Mismatch, and a stored value that is not a bcrypt hash, both give False."""
        # could only match a hash of its own truncated prefix
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False
        if not hashed_password:
            return False
        try:
            return self._context.verify(password, hashed_password)
        except (ValueError, TypeError):
            return False
