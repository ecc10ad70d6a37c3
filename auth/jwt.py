"""
JWT session token creation and verification.

Tokens are HS256-signed JWTs carrying ``sub`` (user id), ``iat`` and
``exp``.  The secret key is loaded from ``config.jwt_secret`` (env var:
``JWT_SECRET``); an empty secret is refused at construction.
"""

from __future__ import annotations

import time
from typing import Optional

from jose import JWTError, jwt

from utils.errors import ConfigurationError, TokenRejectedError

TOKEN_EXPIRY_SECONDS = 86400


class TokenIssuer:
    """Issues and verifies stateless session tokens.  No revocation."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expiry_seconds: int = TOKEN_EXPIRY_SECONDS,
    ) -> None:
        if not secret:
            raise ConfigurationError(
                "JWT_SECRET is not set; refusing to sign session tokens"
            )
        self._secret = secret
        self._algorithm = algorithm
        self.expiry_seconds = expiry_seconds

    def issue(self, user_id: str, now: Optional[float] = None) -> str:
        """Create a signed token containing ``user_id`` and expiry."""
        issued_at = int(now if now is not None else time.time())
        payload = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + self.expiry_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str, now: Optional[float] = None) -> str:
        """
        Verify token and return ``user_id``.

        Raises ``TokenRejectedError`` on a bad signature, malformed token,
        or once the current time reaches ``exp``.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise TokenRejectedError() from exc

        user_id = payload.get("sub")
        expires_at = payload.get("exp")
        if not isinstance(user_id, str) or not user_id:
            raise TokenRejectedError()
        if not isinstance(expires_at, (int, float)):
            raise TokenRejectedError()

        current = now if now is not None else time.time()
        if current >= expires_at:
            raise TokenRejectedError()
        return user_id
