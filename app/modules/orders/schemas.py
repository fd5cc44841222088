"""
Order DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from .status import OrderStatus


# ============================================================================
# Request DTOs
# ============================================================================


class CreateOrderDto(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_phone: str = Field(..., min_length=1, max_length=50)
    customer_email: Optional[str] = Field(None, max_length=255)
    customer_wilaya: Optional[str] = Field(None, max_length=100)
    customer_id_card: Optional[str] = Field(None, max_length=100)
    car_brand: Optional[str] = Field(None, max_length=100)
    car_model: Optional[str] = Field(None, max_length=100)
    car_budget: Optional[str] = Field(None, max_length=100)
    car_custom_budget: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class UpdateOrderDto(BaseModel):
    """Intake fields only; status goes through the status and ship endpoints"""

    customer_name: Optional[str] = Field(None, min_length=1, max_length=255)
    customer_phone: Optional[str] = Field(None, min_length=1, max_length=50)
    customer_email: Optional[str] = Field(None, max_length=255)
    customer_wilaya: Optional[str] = Field(None, max_length=100)
    customer_id_card: Optional[str] = Field(None, max_length=100)
    car_brand: Optional[str] = Field(None, max_length=100)
    car_model: Optional[str] = Field(None, max_length=100)
    car_budget: Optional[str] = Field(None, max_length=100)
    car_custom_budget: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class OrderStatusUpdateDto(BaseModel):
    status: OrderStatus
    note: Optional[str] = Field(None, max_length=500)


class ShipOrderDto(BaseModel):
    carrier: Optional[str] = Field(None, description="cma, maersk, cosco, hmm or cig")
    tracking_number: str = ""
    route: str = ""
    vin_last_digits: str = Field("", description="Required (6 characters) for cig")
    awaiting_tracking: bool = False


# ============================================================================
# Response DTOs
# ============================================================================


class OrderResponse(BaseModel):
    id: int
    reference_number: str
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    customer_wilaya: Optional[str] = None
    customer_id_card: Optional[str] = None
    car_brand: Optional[str] = None
    car_model: Optional[str] = None
    car_budget: Optional[str] = None
    car_custom_budget: Optional[str] = None
    notes: Optional[str] = None
    status: str
    order_data: Dict[str, Any] = {}
    assigned_car_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderListResponse(BaseModel):
    items: List[OrderResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_more: bool


class WhatsAppLinkResponse(BaseModel):
    phone: str
    whatsapp_url: str
