"""
Error taxonomy for the story service.

Every failure the services can raise derives from ``ServiceError`` and carries
the HTTP status and the public message the API returns for it. Store and
hashing failures use a generic message so internal detail never reaches the
client.
"""
from fastapi import status

GENERIC_MESSAGE = "Something went wrong. Please try again later."


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = GENERIC_MESSAGE

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidInput(ServiceError):
    status_code = 422
    message = "Invalid input."


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    message = "Email or username already exists."


class UserNotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class InvalidCredentials(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Password is not correct."


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Not allowed to modify another user."


class FeedNotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Feed not found"


class HashingFailure(ServiceError):
    """The password backend failed; the request must not succeed."""


class StoreUnavailable(ServiceError):
    """Transient infrastructure failure, never retried internally."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class TokenError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid token"


class MalformedToken(TokenError):
    message = "Malformed token"


class InvalidSignature(TokenError):
    message = "Invalid token signature"


class TokenExpired(TokenError):
    message = "Token expired"


# Store-level outcomes, translated by the services above

class NotFoundError(Exception):
    pass


class DuplicateError(Exception):
    pass
