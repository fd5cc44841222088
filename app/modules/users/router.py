"""
Users Router - login, registration and profile management.
"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.engine import get_db_util
from app.core.response_interceptor import CustomAPIRoute, skip_interceptor
from .service import UsersService
from .schemas import (
    AuthResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UpdateUserDto,
    UserResponse,
)
from .auth import (
    get_current_user,
    TokenData,
    require_admin,
)

router = APIRouter(prefix="/users", tags=["users"], route_class=CustomAPIRoute)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register_user(
    register_dto: RegisterRequest,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_admin),
):
    """Register a new dashboard user (Admin only)"""
    return await UsersService.create(db, register_dto)


@router.post("/login", response_model=AuthResponse)
async def login_user(login_dto: LoginRequest, db: AsyncSession = Depends(get_db_util)):
    """Login a user and receive JWT tokens"""
    return await UsersService.login(db, login_dto)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_tokens(
    refresh_request: RefreshTokenRequest, db: AsyncSession = Depends(get_db_util)
):
    """Exchange a refresh token for a new token pair"""
    return await UsersService.refresh_token(db, refresh_request)


@router.get("", response_model=List[UserResponse])
async def get_all_users(
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_admin),
):
    """Get all users (Admin only)"""
    return await UsersService.find_all(db)


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(get_current_user),
):
    """Profile of the caller, used by both front ends to pick the visible screens"""
    return await UsersService.find_one(db, current_user.user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    update_dto: UpdateUserDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_admin),
):
    """Update user information (Admin only)"""
    return await UsersService.update(db, user_id, update_dto)


@router.delete("/{user_id}")
@skip_interceptor
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_admin),
):
    """Delete user (Admin only)"""
    await UsersService.remove(db, user_id)
    return {"message": "User deleted successfully"}
