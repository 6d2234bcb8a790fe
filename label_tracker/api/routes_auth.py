from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from label_tracker.api.deps import get_current_api_key, get_current_user, get_db
from label_tracker.core.auth import generate_api_token, hash_api_token, login_token_label
from label_tracker.core.config import get_settings
from label_tracker.core.logging import get_logger
from label_tracker.core.password import verify_password
from label_tracker.core.throttle import LoginThrottle, get_login_throttle
from label_tracker.models.base import utcnow
from label_tracker.models.user import User, UserApiKey
from label_tracker.schemas.auth import AccountDelete, LoginRequest, LoginResponse, PasswordChange, ProfileUpdate
from label_tracker.schemas.user import UserRead
from label_tracker.services.users import UserService

logger = get_logger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    payload: LoginRequest = Body(...),
    db: AsyncSession = Depends(get_db),
    throttle: LoginThrottle = Depends(get_login_throttle),
):
    """Password login with NP to obtain an API token.

    - NP is upper-cased before lookup.
    - Failed attempts are throttled per NP + client IP.
    - Rotates the user's login token (revokes the previous active one).
    - An inactive account with the right password gets a distinct 401
      and no token.
    """
    client_ip = request.client.host if request.client else None
    throttle_key = throttle.key_for(payload.np, client_ip)

    if throttle.too_many_attempts(throttle_key):
        seconds = throttle.available_in(throttle_key)
        logger.warning("Login throttled", np=payload.np, client_ip=client_ip, retry_after=seconds)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many login attempts. Try again in {seconds} seconds.",
            headers={"Retry-After": str(seconds)},
        )

    user = (await db.execute(select(User).where(User.np == payload.np))).scalar_one_or_none()

    if not user or not verify_password(payload.password, user.password_hash):
        throttle.hit(throttle_key)
        logger.info("Login failed", np=payload.np, client_ip=client_ip)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid NP or password")

    if not user.is_active:
        logger.info("Login rejected for inactive account", np=user.np)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is inactive")

    throttle.clear(throttle_key)
    settings = get_settings()

    # One active login token per user
    label = login_token_label(user.np)
    await db.execute(
        update(UserApiKey)
        .where(UserApiKey.user_id == user.id, UserApiKey.label == label, UserApiKey.is_active.is_(True))
        .values(is_active=False, revoked_at=utcnow())
    )

    raw_token = generate_api_token()
    db.add(
        UserApiKey(
            user_id=user.id,
            key_hash=hash_api_token(raw_token=raw_token, secret_key=settings.secret_key),
            label=label,
            is_active=True,
        )
    )
    user.last_login_at = utcnow()
    await db.commit()

    logger.info("Login succeeded", np=user.np, role=user.role.value)
    return LoginResponse(
        api_key=raw_token,
        api_key_header=settings.auth_api_key_header,
        user=UserRead.model_validate(user),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    api_key: UserApiKey = Depends(get_current_api_key),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Revoke the token used for this request."""
    api_key.is_active = False
    api_key.revoked_at = utcnow()
    await db.commit()
    logger.info("Logged out", np=api_key.user.np)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserRead)
async def read_me(user: User = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=UserRead)
async def update_me(
    payload: ProfileUpdate = Body(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await UserService(db).update_profile(user, payload.name)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    payload: AccountDelete = Body(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete own account after confirming the password. Tokens go with it."""
    await UserService(db).delete_own_account(user, payload.password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    payload: PasswordChange = Body(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await UserService(db).change_own_password(user, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
