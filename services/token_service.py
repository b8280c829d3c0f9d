"""
Bearer token issuing and verification (PyJWT).

HS256 with the shared JWT secret by default; RS256 when both a private and a
public key are configured. Tokens are self-contained: nothing is stored
server-side, so verification never touches the database.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Optional

import jwt

from config import JWTSettings
from shared.datetime_utils import utcnow


class TokenService:
    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings
        if settings.use_rs256:
            # Support keys provided via env with literal \n sequences
            self._signing_key: Any = settings.jwt_private_key.replace("\\n", "\n")
            self._verify_key: Any = settings.jwt_public_key.replace("\\n", "\n")
            self._algorithm = "RS256"
        else:
            self._signing_key = settings.jwt_secret
            self._verify_key = settings.jwt_secret
            self._algorithm = "HS256"

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def issue_access_token(
        self, user_id: str, email: str, now: Optional[datetime] = None
    ) -> str:
        now = now or utcnow()
        ttl = timedelta(seconds=self._settings.access_token_ttl_seconds)
        claims = {
            "iss": self._settings.jwt_issuer,
            "aud": self._settings.jwt_audience,
            "sub": str(user_id),
            "id": str(user_id),
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
        }
        return jwt.encode(claims, self._signing_key, algorithm=self._algorithm)

    def verify_access_token(self, token: str) -> dict:
        """Decode *token*, checking signature, expiry, issuer and audience.

        Raises:
            jwt.PyJWTError: on any verification failure.
        """
        claims = jwt.decode(
            token,
            self._verify_key,
            algorithms=[self._algorithm],
            audience=self._settings.jwt_audience,
            issuer=self._settings.jwt_issuer,
            options={"require": ["exp", "sub"]},
        )
        if not claims.get("id"):
            raise jwt.InvalidTokenError("Token has no user id")
        return claims
