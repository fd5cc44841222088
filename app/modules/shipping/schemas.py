"""
Shipping form DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Union
from datetime import datetime
from enum import Enum

from .models import ShippingFormStatus
from .photos import parse_vehicle_photos


# ============================================================================
# Request DTOs
# ============================================================================


class CreateShippingFormDto(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    passport_number: Optional[str] = Field(None, max_length=100)
    id_card_number: Optional[str] = Field(None, max_length=100)
    code_postal: Optional[str] = Field(None, max_length=20)
    zip_number: Optional[str] = Field(None, max_length=100, description="City name")
    vehicle_model: str = Field("", max_length=255)
    vin_number: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    passport_photo_url: Optional[str] = None
    id_card_url: Optional[str] = None
    id_card_back_url: Optional[str] = None
    # A list, or comma separated text as typed in the form
    vehicle_photos_urls: Union[List[str], str, None] = None
    status: ShippingFormStatus = ShippingFormStatus.pending
    shipment_month: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}$")
    related_transaction_id: Optional[int] = None


class UpdateShippingFormDto(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    passport_number: Optional[str] = Field(None, max_length=100)
    id_card_number: Optional[str] = Field(None, max_length=100)
    code_postal: Optional[str] = Field(None, max_length=20)
    zip_number: Optional[str] = Field(None, max_length=100)
    vehicle_model: Optional[str] = Field(None, max_length=255)
    vin_number: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    passport_photo_url: Optional[str] = None
    id_card_url: Optional[str] = None
    id_card_back_url: Optional[str] = None
    vehicle_photos_urls: Union[List[str], str, None] = None
    status: Optional[ShippingFormStatus] = None
    shipment_month: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}$")


class DocumentKind(str, Enum):
    passport_photo = "passport_photo"
    id_card = "id_card"
    id_card_back = "id_card_back"
    vehicle_photo = "vehicle_photo"


# ============================================================================
# Response DTOs
# ============================================================================


class ShippingFormResponse(BaseModel):
    id: int
    name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    passport_number: Optional[str] = None
    id_card_number: Optional[str] = None
    code_postal: Optional[str] = None
    zip_number: Optional[str] = None
    vehicle_model: str
    vin_number: Optional[str] = None
    notes: Optional[str] = None
    pdf_url: Optional[str] = None
    passport_photo_url: Optional[str] = None
    id_card_url: Optional[str] = None
    id_card_back_url: Optional[str] = None
    vehicle_photos_urls: List[str] = []
    status: ShippingFormStatus
    shipment_month: Optional[str] = None
    related_transaction_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("vehicle_photos_urls", mode="before")
    @classmethod
    def parse_photos(cls, value):
        return parse_vehicle_photos(value)

    class Config:
        from_attributes = True


class ShippingFormListResponse(BaseModel):
    items: List[ShippingFormResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_more: bool


class ShippingShareResponse(BaseModel):
    """Everything the share buttons need"""

    message: str
    whatsapp_url: str
    copy_text: str
    # Recipient-less link for sending the PDF file by hand
    pdf_share_url: Optional[str] = None
