"""
Auth API routes — register, login.

Route prefix: /api/auth
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth.dependencies import get_auth_service
from core.auth_service import AuthService
from utils.schemas import LoginRequest, LoginResponse, MessageResponse, RegisterRequest

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    req: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Register a new user.  Log in afterwards to get a token."""
    await service.register(req)
    return MessageResponse(message="User created successfully")


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Login with email + password."""
    return await service.login(req)
