"""Accounts and roles: registration, login, admin bootstrap and role changes."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mealops.auth import create_tokens, hash_password, verify_password
from mealops.db.repository import UserRepository
from mealops.db.user_tables import UserRow
from mealops.errors import Conflict, NotFound, Unauthorized
from mealops.models import AuthResponse, Role, UserOut

logger = logging.getLogger(__name__)


def _auth_response(user: UserRow) -> AuthResponse:
    return AuthResponse(user=UserOut.model_validate(user), **create_tokens(user.id))


class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)

    async def register(self, email: str, password: str) -> UserOut:
        if await self.users.get_by_email(email):
            raise Conflict("Email already in use")
        user = UserRow(email=email, password_hash=hash_password(password), role=Role.USER)
        try:
            await self.users.add(user)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise Conflict("Email already in use")
        logger.info("Registered user %s", user.id)
        return UserOut.model_validate(user)

    async def login(self, email: str, password: str) -> AuthResponse:
        user = await self.users.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise Unauthorized("Invalid credentials")
        return _auth_response(user)

    async def refresh(self, user_id: str) -> AuthResponse:
        user = await self.users.get(user_id)
        if not user:
            raise Unauthorized("User not found")
        return _auth_response(user)

    async def bootstrap_admin(self, user: UserRow) -> UserOut:
        """Promote ``user`` to ADMIN, allowed only while no admin exists at all."""
        if await self.users.count_admins() > 0:
            raise Conflict("An admin already exists")
        user.role = Role.ADMIN
        await self.session.commit()
        logger.warning("User %s bootstrapped as first admin", user.id)
        return UserOut.model_validate(user)

    async def list_users(self) -> list[UserOut]:
        return [UserOut.model_validate(u) for u in await self.users.list_all()]

    async def change_role(self, actor: UserRow, user_id: str, role: Role) -> UserOut:
        target = await self.users.get(user_id)
        if target is None:
            raise NotFound("User not found")

        if target.role == Role.ADMIN and role == Role.USER:
            # Locks the admin rows; refuses when it would leave zero admins
            changed = await self.users.demote_unless_last_admin(user_id)
            if not changed:
                await self.session.rollback()
                raise Conflict("Cannot remove admin role from the last admin")
            await self.session.commit()
            await self.session.refresh(target)
        elif target.role != role:
            target.role = role
            await self.session.commit()

        logger.info("User %s set role of %s to %s", actor.id, user_id, role.value)
        return UserOut.model_validate(target)
