"""Auth API routes — register, login, token refresh, current user."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mealops.auth import require_user, verify_token
from mealops.db.engine import get_session
from mealops.db.user_tables import UserRow
from mealops.errors import Unauthorized
from mealops.models import AuthResponse, LoginRequest, RefreshRequest, RegisterRequest, UserOut
from mealops.services.users import UserService

router = APIRouter(prefix="/api/v1", tags=["auth"])


@router.post("/auth/register", response_model=UserOut, status_code=201)
async def register(req: RegisterRequest, session: AsyncSession = Depends(get_session)):
    """Create a USER account."""
    return await UserService(session).register(req.email, req.password)


@router.post("/auth/login", response_model=AuthResponse)
async def login(req: LoginRequest, session: AsyncSession = Depends(get_session)):
    """Log in with email + password, returns access and refresh tokens."""
    return await UserService(session).login(req.email, req.password)


@router.post("/auth/refresh", response_model=AuthResponse)
async def refresh(req: RefreshRequest, session: AsyncSession = Depends(get_session)):
    """Exchange a valid refresh token for a new token pair."""
    payload = verify_token(req.refresh_token, "refresh")
    if not payload or not isinstance(payload.get("sub"), str):
        raise Unauthorized("Invalid or expired refresh token")
    return await UserService(session).refresh(payload["sub"])


@router.get("/me", response_model=UserOut)
async def me(user: UserRow = Depends(require_user)):
    return UserOut.model_validate(user)
