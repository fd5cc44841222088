import enum
from datetime import date, datetime
from typing import Optional
from sqlalchemy import (
    String,
    Date,
    DateTime,
    Numeric,
    Integer,
    Text,
    Boolean,
    Enum as SQLEnum,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db.base import BaseModel


class TransactionType(str, enum.Enum):
    """Transaction type enum"""

    Income = "Income"
    Expense = "Expense"


class TransactionCategory(str, enum.Enum):
    """Transaction categories offered by the finance form"""

    CAR_SALE = "Car Sale"
    BUYING_CAR = "Buying Car"
    SHIPPING = "Shipping"
    CUSTOMS = "Customs"
    COMMISSION = "Commission"
    SALARIES = "Salaries"
    RENT = "Rent"
    MAINTENANCE = "Maintenance"
    MARKETING = "Marketing"
    OTHER = "Other"


# Categories that unlock the car, commission and buying-price fields
CAR_CATEGORIES = (TransactionCategory.CAR_SALE, TransactionCategory.BUYING_CAR)


class PaymentStatus(str, enum.Enum):
    """Payment status enum, not kept consistent with paid_amount"""

    Paid = "Paid"
    Partial = "Partial"
    Pending = "Pending"


class PaymentMethod(str, enum.Enum):
    """Payment method enum"""

    cash = "cash"
    bank_transfer = "bank_transfer"
    check = "check"
    credit_card = "credit_card"


class Currency(str, enum.Enum):
    DZD = "DZD"
    EUR = "EUR"
    USD = "USD"
    KRW = "KRW"
    USDT = "USDT"


def _money(nullable: bool = True):
    return mapped_column(
        Numeric(precision=15, scale=2, asdecimal=False), nullable=nullable, default=None
    )


def _rate():
    return mapped_column(
        Numeric(precision=18, scale=8, asdecimal=False), nullable=True, default=None
    )


class FinancialTransaction(BaseModel):
    """
    Income or expense record.

    The description column doubles as an overflow field: related order number,
    ID card, address and notes are appended to it as labelled suffix lines
    (see description.py). car_buying_price is always in DZD.
    Extends BaseModel which provides: id, created_at, updated_at
    """

    __tablename__ = "financial_transactions"

    __table_args__ = (
        Index("idx_financial_transaction_date", "transaction_date"),
        Index("idx_financial_transaction_type_status", "type", "payment_status"),
        Index("idx_financial_transaction_car_order", "related_car_id", "related_order_id"),
    )

    type: Mapped[TransactionType] = mapped_column(
        SQLEnum(TransactionType, name="financial_transaction_type_enum", native_enum=False),
        nullable=False,
    )

    category: Mapped[TransactionCategory] = mapped_column(
        SQLEnum(
            TransactionCategory,
            name="financial_transaction_category_enum",
            native_enum=False,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        index=True,
    )

    amount: Mapped[float] = mapped_column(
        Numeric(precision=15, scale=2, asdecimal=False), nullable=False
    )

    currency: Mapped[Currency] = mapped_column(
        SQLEnum(Currency, name="currency_enum", native_enum=False),
        nullable=False,
        default=Currency.DZD,
        server_default=Currency.DZD.value,
    )

    paid_amount: Mapped[float] = mapped_column(
        Numeric(precision=15, scale=2, asdecimal=False),
        nullable=False,
        default=0.0,
        server_default="0",
    )

    payment_status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus, name="financial_payment_status_enum", native_enum=False),
        nullable=False,
        default=PaymentStatus.Pending,
        server_default=PaymentStatus.Pending.value,
    )

    payment_method: Mapped[PaymentMethod] = mapped_column(
        SQLEnum(PaymentMethod, name="financial_payment_method_enum", native_enum=False),
        nullable=False,
        default=PaymentMethod.cash,
        server_default=PaymentMethod.cash.value,
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Commissions
    seller_commission: Mapped[Optional[float]] = _money()
    buyer_commission: Mapped[Optional[float]] = _money()
    bureau_commission: Mapped[Optional[float]] = _money()
    seller_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)
    buyer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)

    # Car details
    car_brand: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)
    car_model: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)
    car_year: Mapped[Optional[str]] = mapped_column(String(10), nullable=True, default=None)
    car_vin: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None, index=True)
    car_color: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None)
    car_mileage: Mapped[Optional[float]] = mapped_column(
        Numeric(precision=12, scale=1, asdecimal=False), nullable=True, default=None
    )
    car_buying_price: Mapped[Optional[float]] = _money()
    shipping_price: Mapped[Optional[float]] = _money()

    # Purchase currency and the two chained rates used to derive car_buying_price
    buying_currency: Mapped[Optional[str]] = mapped_column(String(10), nullable=True, default=None)
    original_buying_price: Mapped[Optional[float]] = _money()
    exchange_rate_dzd_usdt: Mapped[Optional[float]] = _rate()
    exchange_rate_usdt_krw: Mapped[Optional[float]] = _rate()
    is_paid_in_korea: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="0"
    )
    paid_in_korea_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=False), nullable=True, default=None
    )

    # Client details
    customer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None)
    customer_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)
    customer_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    customer_postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, default=None)
    customer_id_card: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)

    # Documents
    passport_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, default=None)
    passport_photo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    id_card_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    id_card_back_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    # JSON array text; older rows may hold a "{a,b}" literal, read through parse_vehicle_photos
    vehicle_photos_urls: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    # Set when the transaction was created by assigning a car to an order
    related_order_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=None)
    related_car_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=None)

    def __repr__(self) -> str:
        return (
            f"<FinancialTransaction(id={self.id}, type={self.type.value}, "
            f"category='{self.category.value}', amount={self.amount})>"
        )
