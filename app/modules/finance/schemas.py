"""
Financial transaction DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime, date

from app.modules.shipping.photos import parse_vehicle_photos
from .models import (
    TransactionType,
    TransactionCategory,
    PaymentStatus,
    PaymentMethod,
    Currency,
)

# Numeric form input: a number, or the text typed in the field
NumberInput = Union[float, str, None]


# ============================================================================
# Request DTOs
# ============================================================================


class TransactionFormDto(BaseModel):
    """
    The transaction form as submitted, for create, update and preview.
    Numeric fields are parsed leniently; validation messages come from the service.
    """

    # Transaction information
    type: TransactionType = TransactionType.Income
    category: TransactionCategory = TransactionCategory.CAR_SALE
    description: Optional[str] = None
    transaction_date: date = Field(default_factory=date.today)

    # Payment details
    currency: Currency = Currency.DZD
    amount: NumberInput = None
    paid_amount: NumberInput = None
    payment_status: PaymentStatus = PaymentStatus.Pending
    payment_method: PaymentMethod = PaymentMethod.cash

    # Car details
    car_brand: Optional[str] = Field(None, max_length=100)
    car_model: Optional[str] = Field(None, max_length=100)
    car_year: Union[int, str, None] = None
    car_color: Optional[str] = Field(None, max_length=50)
    car_vin: Optional[str] = Field(None, max_length=50)
    car_mileage: NumberInput = None
    car_buying_price: NumberInput = Field(None, description="Always in DZD")
    shipping_price: NumberInput = None

    # Currency exchange; blank rates are filled from the saved settings
    buying_currency: Optional[str] = "KRW"
    original_buying_price: NumberInput = None
    exchange_rate_dzd_usdt: NumberInput = None
    exchange_rate_usdt_krw: NumberInput = None
    is_paid_in_korea: bool = False
    paid_in_korea_date: Optional[datetime] = None

    # Client details
    customer_name: Optional[str] = Field(None, max_length=255)
    customer_phone: Optional[str] = Field(None, max_length=50)
    customer_email: Optional[str] = Field(None, max_length=255)
    customer_postal_code: Optional[str] = Field(None, max_length=20)
    customer_id_card: Optional[str] = Field(None, max_length=100)
    customer_address: Optional[str] = None

    # Documents
    passport_number: Optional[str] = Field(None, max_length=100)
    passport_photo_url: Optional[str] = None
    id_card_url: Optional[str] = None
    id_card_back_url: Optional[str] = None
    vehicle_photos_urls: Union[List[str], str, None] = None

    # Commissions
    seller_name: Optional[str] = Field(None, max_length=255)
    seller_commission: NumberInput = None
    buyer_name: Optional[str] = Field(None, max_length=255)
    buyer_commission: NumberInput = None
    bureau_commission: NumberInput = None

    # Stored inside the description
    related_order_number: Optional[str] = None
    notes: Optional[str] = None

    related_order_id: Optional[int] = None
    related_car_id: Optional[int] = None


# ============================================================================
# Response DTOs
# ============================================================================


class FinancialSummaryResponse(BaseModel):
    total_commissions: float
    remaining: float
    net_profit: Optional[float] = None
    car_buying_price: Optional[float] = None

    class Config:
        from_attributes = True


class TransactionResponse(BaseModel):
    id: int
    type: TransactionType
    category: TransactionCategory
    amount: float
    currency: Currency
    paid_amount: float
    payment_status: PaymentStatus
    payment_method: PaymentMethod
    description: Optional[str] = None
    transaction_date: date

    seller_name: Optional[str] = None
    seller_commission: Optional[float] = None
    buyer_name: Optional[str] = None
    buyer_commission: Optional[float] = None
    bureau_commission: Optional[float] = None

    car_brand: Optional[str] = None
    car_model: Optional[str] = None
    car_year: Optional[str] = None
    car_color: Optional[str] = None
    car_vin: Optional[str] = None
    car_mileage: Optional[float] = None
    car_buying_price: Optional[float] = None
    shipping_price: Optional[float] = None

    buying_currency: Optional[str] = None
    original_buying_price: Optional[float] = None
    exchange_rate_dzd_usdt: Optional[float] = None
    exchange_rate_usdt_krw: Optional[float] = None
    is_paid_in_korea: bool
    paid_in_korea_date: Optional[datetime] = None

    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None
    customer_postal_code: Optional[str] = None
    customer_id_card: Optional[str] = None

    passport_number: Optional[str] = None
    passport_photo_url: Optional[str] = None
    id_card_url: Optional[str] = None
    id_card_back_url: Optional[str] = None
    vehicle_photos_urls: List[str] = []

    related_order_id: Optional[int] = None
    related_car_id: Optional[int] = None

    created_at: datetime
    updated_at: datetime

    @field_validator("vehicle_photos_urls", mode="before")
    @classmethod
    def parse_photos(cls, value):
        return parse_vehicle_photos(value)

    class Config:
        from_attributes = True


class TransactionDetailResponse(TransactionResponse):
    """Detail view: description split back into its parts, plus the derived values"""

    base_description: str
    related_order_number: str = ""
    notes: str = ""
    summary: FinancialSummaryResponse


class TransactionListResponse(BaseModel):
    items: List[TransactionResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_more: bool
