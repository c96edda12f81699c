"""Admin API endpoints — user roles and first-admin bootstrap."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mealops.auth import require_admin, require_user
from mealops.db.engine import get_session
from mealops.db.user_tables import UserRow
from mealops.models import RoleUpdate, UserOut
from mealops.services.users import UserService

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.post("/bootstrap-self", response_model=UserOut)
async def bootstrap_self(
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    """Make the caller the first admin. 409 once any admin exists."""
    return await UserService(session).bootstrap_admin(user)


@router.get("/users", response_model=list[UserOut])
async def list_users(
    _admin: UserRow = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    return await UserService(session).list_users()


@router.patch("/users/{user_id}/role", response_model=UserOut)
async def change_role(
    user_id: str,
    req: RoleUpdate,
    admin: UserRow = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    """Promote or demote a user. The last remaining admin cannot be demoted."""
    return await UserService(session).change_role(admin, user_id, req.role)
