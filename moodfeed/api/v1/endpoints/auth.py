"""Auth endpoints: register, login, refresh."""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from moodfeed.api.deps import get_db
from moodfeed.core.errors import AuthError
from moodfeed.core.security import decode_token
from moodfeed.schemas.user import LoginRequest, Token, TokenRefresh, UserCreate
from moodfeed.services.auth_service import (
    authenticate,
    create_tokens_for_user,
    ensure_profile,
    get_user_by_id,
    register,
)
from moodfeed.services.profile_service import profile_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register_endpoint(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    user, profile = await register(db, data)
    access_token, refresh_token = create_tokens_for_user(user)
    return Token(
        access_token=access_token,
        refresh_token=refresh_token,
        user=await profile_to_response(db, profile),
    )


@router.post("/login", response_model=Token)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    user, profile = await authenticate(db, data.email, data.password)
    logger.info("Login %s", user.id)
    access_token, refresh_token = create_tokens_for_user(user)
    return Token(
        access_token=access_token,
        refresh_token=refresh_token,
        user=await profile_to_response(db, profile),
    )


@router.post("/refresh", response_model=Token)
async def refresh_token(
    body: TokenRefresh,
    db: AsyncSession = Depends(get_db),
):
    user_id = decode_token(body.refresh_token, "refresh")
    if user_id is None:
        raise AuthError("Invalid refresh token", kind="INVALID_TOKEN")
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise AuthError("User not found", kind="INVALID_TOKEN")
    profile = await ensure_profile(db, user)
    new_access, new_refresh = create_tokens_for_user(user)
    return Token(
        access_token=new_access,
        refresh_token=new_refresh,
        user=await profile_to_response(db, profile),
    )
