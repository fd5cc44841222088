from typing import Any, Dict, Optional
from sqlalchemy import String, Text, Integer, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db.base import BaseModel
from .status import OrderStatus


class Order(BaseModel):
    """
    Customer car order.

    status is plain text so the legacy "completed" value still loads.
    order_data carries the statusHistory log, lastUpdated, the intake snapshot
    and, once shipped, the shipping record.
    Extends BaseModel which provides: id, created_at, updated_at
    """

    __tablename__ = "orders"

    __table_args__ = (
        Index("idx_order_status_created", "status", "created_at"),
    )

    reference_number: Mapped[str] = mapped_column(
        String(20), nullable=False, unique=True, index=True
    )

    # Customer
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Digits only
    customer_phone: Mapped[str] = mapped_column(String(50), nullable=False)
    customer_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)
    customer_wilaya: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)
    customer_id_card: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)

    # Requested car
    car_brand: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)
    car_model: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)
    # Budget bucket, or free text in car_custom_budget
    car_budget: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)
    car_custom_budget: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=OrderStatus.pending.value,
        server_default=OrderStatus.pending.value,
        index=True,
    )

    order_data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Held car, mirrored by Car.assigned_to_order
    assigned_car_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=None)

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, reference='{self.reference_number}', status='{self.status}')>"
