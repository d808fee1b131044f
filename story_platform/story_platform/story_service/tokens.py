"""
Session token creation and verification.

Tokens are HS256 JWTs: ``iss`` carries the user id and ``exp`` the expiry.
Claims are signed, not encrypted. Nothing is stored server-side, so a token
stays valid until it expires.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from .errors import InvalidSignature, MalformedToken, TokenExpired

DEFAULT_LIFETIME = timedelta(hours=24)


class TokenIssuer:
    def __init__(self, secret: str, lifetime: timedelta = DEFAULT_LIFETIME, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self.lifetime = lifetime
        self.algorithm = algorithm

    def issue(self, user_id: str, now: Optional[datetime] = None) -> str:
        if now is None:
            now = datetime.now(timezone.utc)
        payload = {"iss": str(user_id), "exp": now + self.lifetime}
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """
        Check signature and expiry and return the user id in ``iss``.

        Raises:
            InvalidSignature: token was not signed with this issuer's secret
            TokenExpired: signature is valid but ``exp`` has passed
            MalformedToken: anything that cannot be parsed as one of our tokens
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["iss", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignature() from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedToken() from exc

        user_id = payload["iss"]
        if not isinstance(user_id, str) or not user_id:
            raise MalformedToken()
        return user_id
