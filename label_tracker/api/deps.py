from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from label_tracker.core.auth import hash_api_token
from label_tracker.core.config import get_settings
from label_tracker.core.database import get_db
from label_tracker.models.base import utcnow
from label_tracker.models.user import User, UserApiKey
from label_tracker.services.sirine_client import SirineApiClient

__all__ = ["get_db", "get_current_api_key", "get_current_user", "require_admin", "get_sirine_client"]


async def get_current_api_key(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> UserApiKey:
    """
    Resolve the login token (header ``auth_api_key_header``) to its key row.

    Unknown, revoked or empty tokens and tokens of inactive users are all
    rejected with the same 401.
    """
    settings = get_settings()
    provided = request.headers.get(settings.auth_api_key_header)
    if not provided or not provided.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    key_hash = hash_api_token(raw_token=provided.strip(), secret_key=settings.secret_key)
    result = await db.execute(
        select(UserApiKey)
        .options(selectinload(UserApiKey.user))
        .where(UserApiKey.key_hash == key_hash, UserApiKey.is_active.is_(True))
    )
    api_key = result.scalar_one_or_none()
    if api_key is None or api_key.user is None or not api_key.user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    api_key.last_used_at = utcnow()
    await db.commit()
    return api_key


async def get_current_user(api_key: UserApiKey = Depends(get_current_api_key)) -> User:
    """The authenticated, active user behind the request."""
    return api_key.user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.role.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return user


def get_sirine_client() -> SirineApiClient:
    return SirineApiClient.from_settings()
