# boutique/tokens.py
import logging
import time
from typing import Callable, Optional

import jwt

from .errors import Unauthorized

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ADMIN_ROLE = "admin"


class TokenService:
    """
    Issues and verifies stateless admin bearer tokens (HS256 JWTs).

    A token carries the admin's username, a fixed role marker and an expiry.
    Nothing is stored server side: validity is the signature plus `exp`.
    """

    def __init__(self, secret: str, ttl_hours: float = 2, clock: Optional[Callable[[], float]] = None):
        if not secret:
            raise ValueError("token secret must not be empty")
        self.secret = secret
        self.ttl_seconds = int(ttl_hours * 3600)
        self._clock = clock or time.time

    def issue(self, identity: str) -> str:
        now = int(self._clock())
        payload = {
            "username": identity,
            "role": ADMIN_ROLE,
            "iat": now,
            "exp": now + self.ttl_seconds,
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> str:
        try:
            # expiry is checked here against our own clock so tests can move time
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "verify_iat": False, "require": ["exp"]},
            )
        except jwt.PyJWTError as exc:
            logger.debug("rejected token: %s", exc)
            raise Unauthorized("Invalid or expired token") from exc

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or self._clock() >= exp:
            raise Unauthorized("Invalid or expired token")
        identity = payload.get("username")
        if not identity or payload.get("role") != ADMIN_ROLE:
            raise Unauthorized("Invalid or expired token")
        return identity
