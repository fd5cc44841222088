"""
Inventory DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from enum import Enum

from app.modules.finance.models import Currency
from app.modules.shipping.photos import parse_vehicle_photos
from .models import CarStatus


# ============================================================================
# Request DTOs
# ============================================================================


class CreateCarDto(BaseModel):
    brand: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=100)
    year: Optional[int] = Field(None, ge=1900, le=2100)
    color: Optional[str] = Field(None, max_length=50)
    mileage: Optional[float] = Field(None, ge=0)
    vin: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=255)
    selling_price: Optional[float] = Field(None, ge=0)
    currency: Currency = Currency.DZD
    purchase_price: Optional[float] = Field(None, ge=0, description="In DZD")
    buying_price_krw: Optional[float] = Field(None, ge=0)
    photos_urls: List[str] = []
    video_url: Optional[str] = None
    notes: Optional[str] = None
    status: CarStatus = CarStatus.available


class UpdateCarDto(BaseModel):
    brand: Optional[str] = Field(None, min_length=1, max_length=100)
    model: Optional[str] = Field(None, min_length=1, max_length=100)
    year: Optional[int] = Field(None, ge=1900, le=2100)
    color: Optional[str] = Field(None, max_length=50)
    mileage: Optional[float] = Field(None, ge=0)
    vin: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=255)
    selling_price: Optional[float] = Field(None, ge=0)
    currency: Optional[Currency] = None
    purchase_price: Optional[float] = Field(None, ge=0)
    buying_price_krw: Optional[float] = Field(None, ge=0)
    photos_urls: Optional[List[str]] = None
    video_url: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[CarStatus] = None


class AssignCarDto(BaseModel):
    order_id: int = Field(..., gt=0)


class UnassignCarDto(BaseModel):
    confirm: bool = Field(False, description="Must be true, mirrors the confirmation dialog")


class ShareCarDto(BaseModel):
    order_ids: List[int] = Field(..., min_length=1)


class MediaKind(str, Enum):
    photo = "photo"
    video = "video"


# ============================================================================
# Response DTOs
# ============================================================================


class CarResponse(BaseModel):
    id: int
    brand: str
    model: str
    year: Optional[int] = None
    color: Optional[str] = None
    mileage: Optional[float] = None
    vin: Optional[str] = None
    location: Optional[str] = None
    selling_price: Optional[float] = None
    currency: str
    purchase_price: Optional[float] = None
    buying_price_krw: Optional[float] = None
    photos_urls: List[str] = []
    video_url: Optional[str] = None
    notes: Optional[str] = None
    status: CarStatus
    assigned_to_order: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("photos_urls", mode="before")
    @classmethod
    def parse_photos(cls, value):
        return parse_vehicle_photos(value)

    class Config:
        from_attributes = True


class CarListResponse(BaseModel):
    items: List[CarResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_more: bool


class AssignCarResponse(BaseModel):
    car: CarResponse
    order_id: int
    transaction_id: Optional[int] = None
    # Non-fatal problems with the order update or the sale transaction
    warnings: List[str] = []


class UnassignCarResponse(BaseModel):
    car: CarResponse
    order_id: Optional[int] = None
    deleted_transactions: int = 0


class ShareLink(BaseModel):
    order_id: int
    customer_name: str
    phone: str
    whatsapp_url: str


class ShareCarResponse(BaseModel):
    message: str
    links: List[ShareLink]
    # Selected orders without a phone number
    skipped_order_ids: List[int] = []
