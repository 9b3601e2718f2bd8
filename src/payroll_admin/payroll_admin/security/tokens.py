from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_TOKEN_HOURS
from ..core.exceptions import CredentialExpired, InvalidCredential
from ..users.model import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: Optional[str]
    role_id: Optional[int]
    issued_at: Optional[int]
    expires_at: Optional[int]


class TokenCodec:
    """Issues and verifies signed, time-limited bearer tokens (HS256 by default)."""

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        expires_hours: int = DEFAULT_TOKEN_HOURS,
        clock: Callable[[], datetime] = now_utc,
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(hours=int(expires_hours))
        self._clock = clock

    @property
    def expires_in_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def issue(self, user: User) -> str:
        issued = self._clock()
        claims = {
            "sub": str(user.user_id),
            "email": user.email,
            "role_id": user.role_id,
            "iat": int(issued.timestamp()),
            "exp": int((issued + self._ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenClaims:
        # ExpiredSignatureError subclasses JWTError, so it must be caught first.
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise CredentialExpired()
        except JWTError:
            raise InvalidCredential()

        try:
            user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            logger.info("Rejected token without a usable subject claim")
            raise InvalidCredential()

        role_id = payload.get("role_id")
        return TokenClaims(
            user_id=user_id,
            email=payload.get("email"),
            role_id=int(role_id) if role_id is not None else None,
            issued_at=payload.get("iat"),
            expires_at=payload.get("exp"),
        )
