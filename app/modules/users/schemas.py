"""
User DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from .models import Role


class UpdateUserDto(BaseModel):
    """DTO for updating user information"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[Role] = None
    phone: Optional[str] = Field(None, max_length=50)

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    """Response model for User entity"""

    id: int
    username: str
    name: str
    role: Role
    phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    username: str
    password: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=255)
    role: Role = Role.EMPLOYEE
    phone: Optional[str] = Field(None, max_length=50)


class AuthResponse(BaseModel):
    user: UserResponse
    token: TokenResponse

    class Config:
        from_attributes = True
