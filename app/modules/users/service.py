"""
UsersService - registration, login and profile management.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from app.modules.users.auth import AuthService
from .models import User
from .schemas import (
    AuthResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UpdateUserDto,
    UserResponse,
)


class UsersService:
    """
    Users service.
    All methods use async/await and take the request's session.
    """

    @staticmethod
    def _issue_tokens(user: User) -> TokenResponse:
        token_data: Dict[str, Any] = {
            "sub": user.username,
            "user_id": user.id,
            "role": user.role.value,
        }
        return TokenResponse(
            access_token=AuthService.create_access_token(token_data),
            refresh_token=AuthService.create_refresh_token(token_data),
            token_type="bearer",
        )

    @staticmethod
    async def create(db: AsyncSession, create_dto: RegisterRequest) -> AuthResponse:
        """
        Create a new user and log them in.

        Raises:
            ConflictError: If the username is taken
        """
        existing = await db.scalar(select(User).where(User.username == create_dto.username))
        if existing:
            raise ConflictError("User already exists with this username")

        user = User(
            username=create_dto.username,
            password=AuthService.get_password_hash(create_dto.password),
            name=create_dto.name,
            role=create_dto.role,
            phone=create_dto.phone,
        )
        db.add(user)
        await db.flush()
        await db.refresh(user)

        return AuthResponse(
            user=UserResponse.model_validate(user),
            token=UsersService._issue_tokens(user),
        )

    @staticmethod
    async def login(db: AsyncSession, login_dto: LoginRequest) -> AuthResponse:
        """
        Login a user.

        Raises:
            UnauthorizedError: On unknown username or wrong password
        """
        user = await db.scalar(select(User).where(User.username == login_dto.username))
        if not user or not AuthService.verify_password(login_dto.password, user.password):
            raise UnauthorizedError("Invalid username or password")

        return AuthResponse(
            user=UserResponse.model_validate(user),
            token=UsersService._issue_tokens(user),
        )

    @staticmethod
    async def refresh_token(db: AsyncSession, refresh_request: RefreshTokenRequest) -> TokenResponse:
        """
        Generate new tokens from a refresh token.

        Raises:
            UnauthorizedError: If refresh token is invalid or the user is gone
        """
        payload: Optional[Dict[str, Any]] = AuthService.verify_refresh_token(
            refresh_request.refresh_token
        )
        if not payload:
            raise UnauthorizedError("Invalid refresh token")

        user = await db.scalar(select(User).where(User.id == payload.get("user_id")))
        if not user:
            raise UnauthorizedError("User not found")

        return UsersService._issue_tokens(user)

    @staticmethod
    async def find_all(db: AsyncSession) -> List[User]:
        result = await db.execute(select(User).order_by(User.name))
        return list(result.scalars().all())

    @staticmethod
    async def find_one(db: AsyncSession, user_id: int) -> User:
        """
        Raises:
            NotFoundError: If user not found
        """
        user = await db.scalar(select(User).where(User.id == user_id))
        if not user:
            raise NotFoundError("User", user_id)
        return user

    @staticmethod
    async def update(db: AsyncSession, user_id: int, update_dto: UpdateUserDto) -> User:
        """Update only the fields that were sent."""
        user = await UsersService.find_one(db, user_id)

        for key, value in update_dto.model_dump(exclude_unset=True).items():
            setattr(user, key, value)

        await db.flush()
        await db.refresh(user)
        return user

    @staticmethod
    async def remove(db: AsyncSession, user_id: int) -> None:
        user = await UsersService.find_one(db, user_id)
        await db.delete(user)
        await db.flush()
