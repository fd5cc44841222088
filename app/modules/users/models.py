import enum
from sqlalchemy import String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional

from app.core.db.base import BaseModel


class Role(str, enum.Enum):
    """Dashboard roles: admins manage settings and deletions, employees do daily work"""

    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"


class User(BaseModel):
    """
    Dashboard user profile.
    Extends BaseModel which provides: id, created_at, updated_at
    """

    __tablename__ = "profiles"

    username: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )

    # bcrypt hash, never returned by the API
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[Role] = mapped_column(
        SQLEnum(
            Role,
            name="profiles_role_enum",
            native_enum=False,
        ),
        nullable=False,
        default=Role.EMPLOYEE,
        server_default=Role.EMPLOYEE.value,
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(50), nullable=True, default=None
    )

    def __repr__(self) -> str:
        return (
            f"<User(id={self.id}, username='{self.username}', role={self.role.value})>"
        )
