"""
Authentication endpoints: register, login and the current identity.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from social_network_api.app.api.deps import get_auth_service
from social_network_api.app.core.security import get_current_user
from social_network_api.app.schemas.common import envelope
from social_network_api.app.schemas.user import LoginRequest, UserCreate
from social_network_api.app.services.auth_service import AuthService


router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserCreate,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Register a new user and return it with a session token.

    Username and email must both be unused.
    """
    user, token = await service.register(payload)
    return envelope({"user": user, "token": token}, "User registered successfully")


@router.post("/login")
async def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Exchange email and password for a session token."""
    user, token = await service.login(payload)
    return envelope({"user": user, "token": token}, "Login successful")


@router.get("/me")
async def get_me(
    current_user: dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    user = await service.me(current_user["user_id"])
    return envelope({"user": user})
