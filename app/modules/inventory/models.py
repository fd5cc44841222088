import enum
from typing import Optional
from sqlalchemy import String, Text, Integer, Numeric, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db.base import BaseModel


class CarStatus(str, enum.Enum):
    available = "available"
    reserved = "reserved"
    sold = "sold"


class Car(BaseModel):
    """
    Car in stock (in Korea, in transit or on the lot).

    assigned_to_order and Order.assigned_car_id always change together;
    at most one order holds a car at a time.
    Extends BaseModel which provides: id, created_at, updated_at
    """

    __tablename__ = "car_inventory"

    __table_args__ = (
        Index("idx_car_status_created", "status", "created_at"),
    )

    brand: Mapped[str] = mapped_column(String(100), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=None)
    color: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None)
    mileage: Mapped[Optional[float]] = mapped_column(
        Numeric(precision=12, scale=1, asdecimal=False), nullable=True, default=None
    )
    vin: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None, index=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)

    selling_price: Mapped[Optional[float]] = mapped_column(
        Numeric(precision=15, scale=2, asdecimal=False), nullable=True, default=None
    )
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="DZD", server_default="DZD")
    # In DZD
    purchase_price: Mapped[Optional[float]] = mapped_column(
        Numeric(precision=15, scale=2, asdecimal=False), nullable=True, default=None
    )
    buying_price_krw: Mapped[Optional[float]] = mapped_column(
        Numeric(precision=15, scale=2, asdecimal=False), nullable=True, default=None
    )

    # JSON array text of photo URLs
    photos_urls: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    video_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    status: Mapped[CarStatus] = mapped_column(
        SQLEnum(CarStatus, name="car_status_enum", native_enum=False),
        nullable=False,
        default=CarStatus.available,
        server_default=CarStatus.available.value,
        index=True,
    )

    assigned_to_order: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, default=None, index=True
    )

    def __repr__(self) -> str:
        return f"<Car(id={self.id}, '{self.brand} {self.model}', status={self.status.value})>"
