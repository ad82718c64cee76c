"""User service: register, login, refresh.

Self-registration always creates a ``client``; employees and admins are
provisioned by seed data. Transactions are managed by the caller (router
layer) via `async with db.begin()`.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.enums import UserRole
from src.bk_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
)
from src.bk_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.bk_gateway.auth.password import hash_password, verify_password
from src.bk_gateway.user.db_models import UserModel


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        db: AsyncSession,
    ) -> UserModel:
        email = email.lower()
        result = await db.execute(select(UserModel).where(UserModel.email == email))
        if result.scalar_one_or_none() is not None:
            raise EmailExistsError()

        user = UserModel(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=UserRole.CLIENT.value,
            is_active=True,
        )
        db.add(user)
        await db.flush()  # Get user.id without committing
        await db.refresh(user)
        return user

    async def login(
        self,
        email: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str, str]:
        """Authenticate user and return (user, access_token, refresh_token).

        Unknown email and wrong password both raise InvalidCredentialsError.
        """
        result = await db.execute(select(UserModel).where(UserModel.email == email.lower()))
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDisabledError()

        return (
            user,
            create_access_token(str(user.id), user.role),
            create_refresh_token(str(user.id)),
        )

    async def refresh(self, refresh_token: str, db: AsyncSession) -> str:
        """Validate refresh token and return a new access token for an active user."""
        payload = decode_token(refresh_token, expected_type="refresh")
        try:
            user_id = uuid.UUID(str(payload.get("sub")))
        except ValueError:
            raise InvalidRefreshTokenError() from None
        result = await db.execute(select(UserModel).where(UserModel.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise InvalidRefreshTokenError()
        if not user.is_active:
            raise AccountDisabledError()
        return create_access_token(str(user_id), user.role)
