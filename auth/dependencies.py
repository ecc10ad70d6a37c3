"""
FastAPI dependencies for authentication.

Provides ``get_current_user_id`` plus accessors for the services that
``main.create_app`` places on ``app.state``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.jwt import TokenIssuer
from core.auth_service import AuthService
from core.todo_service import TodoService
from utils.errors import TokenRejectedError

# auto_error=False so a missing header goes through the same 401 path as a bad token.
_bearer_scheme = HTTPBearer(auto_error=False)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_todo_service(request: Request) -> TodoService:
    return request.app.state.todo_service


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> str:
    """
    Extract and verify the Bearer token, returning the authenticated
    ``user_id``.
    """
    if credentials is None:
        raise TokenRejectedError("No token, authorization denied")
    return tokens.verify(credentials.credentials)
