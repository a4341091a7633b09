from __future__ import annotations

import uuid
from datetime import timedelta

import jwt
from jwt import PyJWTError

from eventdesk.core.clock import Clock, utc_now
from eventdesk.services.error_codes import ErrorCode
from eventdesk.services.exceptions import AuthError


class SessionTokenIssuer:
    """Signs and verifies the session JWT carried in the session cookie.

    The signing key is handed in once at startup; there is no runtime rotation.
    """

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        issuer: str = "eventdesk",
        ttl: timedelta = timedelta(days=5),
        clock: Clock = utc_now,
    ) -> None:
        if not secret:
            raise ValueError("session signing secret is required")
        self._secret = secret
        self._algorithm = algorithm
        self._issuer = issuer
        self._clock = clock
        self.ttl = ttl

    @property
    def max_age_seconds(self) -> int:
        return int(self.ttl.total_seconds())

    def issue(self, user_id: uuid.UUID) -> str:
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
            "iss": self._issuer,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str | None) -> uuid.UUID:
        if not token:
            raise AuthError(ErrorCode.NO_TOKEN.value, "no token")
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={"require": ["sub", "exp", "iss"]},
            )
            return uuid.UUID(claims["sub"])
        except (PyJWTError, ValueError) as exc:
            raise AuthError(ErrorCode.INVALID_TOKEN.value, "invalid token") from exc
