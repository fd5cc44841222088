import enum
from typing import Optional
from sqlalchemy import String, Text, Integer, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db.base import BaseModel


class ShippingFormStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"


class ShippingForm(BaseModel):
    """
    Customer and vehicle details sent to the shipping agent.
    pdf_url points at the latest generated PDF, replaced on every edit.
    Extends BaseModel which provides: id, created_at, updated_at
    """

    __tablename__ = "shipping_forms"

    __table_args__ = (
        Index("idx_shipping_form_status_month", "status", "shipment_month"),
    )

    # Customer
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    passport_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)
    id_card_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)
    code_postal: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, default=None)
    # Holds the city name
    zip_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)

    # Vehicle
    vehicle_model: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    vin_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None, index=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    # Documents and media
    pdf_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    passport_photo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    id_card_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    id_card_back_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    # JSON array text; older rows may hold a "{a,b}" literal, read through parse_vehicle_photos
    vehicle_photos_urls: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    status: Mapped[ShippingFormStatus] = mapped_column(
        SQLEnum(ShippingFormStatus, name="shipping_form_status_enum", native_enum=False),
        nullable=False,
        default=ShippingFormStatus.pending,
        server_default=ShippingFormStatus.pending.value,
    )

    # YYYY-MM
    shipment_month: Mapped[Optional[str]] = mapped_column(String(7), nullable=True, default=None)

    related_transaction_id: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, default=None, index=True
    )

    def __repr__(self) -> str:
        return f"<ShippingForm(id={self.id}, name='{self.name}', vin='{self.vin_number}', status={self.status.value})>"
