"""
Registration and login.

Registration never issues a token; the client logs in afterwards.
Login failures are reported identically whether the email is unknown or
the password is wrong.
"""

from __future__ import annotations

import asyncio
import logging

from auth.jwt import TokenIssuer
from auth.password import (
    DEFAULT_ROUNDS,
    MAX_PASSWORD_BYTES,
    hash_password,
    password_too_long,
    verify_password,
)
from database.base import UserStore
from utils.errors import ConflictError, InvalidCredentialsError, InvalidInputError
from utils.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserPublic,
    normalize_email,
)

logger = logging.getLogger(__name__)


def _present(value: str | None) -> bool:
    return value is not None and bool(value.strip())


class AuthService:
    def __init__(
        self,
        users: UserStore,
        tokens: TokenIssuer,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._bcrypt_rounds = bcrypt_rounds

    async def register(self, req: RegisterRequest) -> UserPublic:
        if not all(
            _present(v) for v in (req.first_name, req.last_name, req.email, req.password)
        ):
            raise InvalidInputError("All fields are required")
        if password_too_long(req.password):
            raise InvalidInputError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )

        email = normalize_email(req.email)
        if await self._users.find_by_email(email) is not None:
            raise ConflictError("User already exists")

        password_hash = await asyncio.to_thread(
            hash_password, req.password, self._bcrypt_rounds
        )
        # The unique index still rejects a racing duplicate here.
        user = await self._users.create(
            first_name=req.first_name.strip(),
            last_name=req.last_name.strip(),
            email=email,
            password_hash=password_hash,
        )
        logger.info("Registered user %s", user.id)
        return UserPublic.from_record(user)

    async def login(self, req: LoginRequest) -> LoginResponse:
        if not (_present(req.email) and _present(req.password)):
            raise InvalidInputError("Email and password are required")

        user = await self._users.find_by_email(req.email)
        if user is None:
            raise InvalidCredentialsError("Invalid credentials")

        matches = await asyncio.to_thread(verify_password, req.password, user.password_hash)
        if not matches:
            raise InvalidCredentialsError("Invalid credentials")

        token = self._tokens.issue(user.id)
        logger.info("Login: %s", user.id)
        return LoginResponse(token=token, user=UserPublic.from_record(user))
