"""FastAPI dependencies: get_current_user and role gates.

Usage in any protected router:
    from src.bk_gateway.auth.dependencies import get_current_user, require_staff

    @router.get("/protected")
    async def protected(user: UserModel = Depends(require_staff)):
        ...
"""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import get_db_session
from src.bk_common.enums import UserRole
from src.bk_common.errors import AccountDisabledError, InvalidCredentialsError, RoleNotAllowedError
from src.bk_gateway.auth.jwt_handler import decode_token
from src.bk_gateway.user.db_models import UserModel

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Extract and validate the JWT Bearer token, return the UserModel.

    Raises HTTP 401 if the token is missing, invalid, expired, or names an unknown user.
    Raises AccountDisabledError (403) if the user is inactive.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise _CREDENTIALS_EXCEPTION from None

    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise _CREDENTIALS_EXCEPTION

    if not user.is_active:
        raise AccountDisabledError()

    return user


def require_roles(*roles: UserRole):  # type: ignore[no-untyped-def]
    """Build a dependency that only lets users with one of ``roles`` through."""
    allowed = {r.value for r in roles}

    async def _check(current_user: UserModel = Depends(get_current_user)) -> UserModel:
        if current_user.role not in allowed:
            raise RoleNotAllowedError(current_user.role)
        return current_user

    return _check


require_staff = require_roles(UserRole.ADMIN, UserRole.EMPLOYEE)
