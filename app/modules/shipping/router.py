"""Shipping Router - shipping forms, documents and sharing"""

from typing import Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.engine import get_db_util
from app.core.response_interceptor import CustomAPIRoute, skip_interceptor
from app.modules.users.auth import TokenData, require_admin, require_any_role
from .models import ShippingFormStatus
from .service import ShippingService
from .schemas import (
    CreateShippingFormDto,
    UpdateShippingFormDto,
    DocumentKind,
    ShippingFormResponse,
    ShippingFormListResponse,
    ShippingShareResponse,
)

router = APIRouter(prefix="/shipping-forms", tags=["shipping"], route_class=CustomAPIRoute)


@router.post("", response_model=ShippingFormResponse, status_code=201)
async def create_shipping_form(
    create_dto: CreateShippingFormDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Create a shipping form and upload its PDF"""
    return await ShippingService.create(db, create_dto)


@router.get("", response_model=ShippingFormListResponse)
async def get_shipping_forms(
    status: Optional[ShippingFormStatus] = Query(None),
    shipment_month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$"),
    search: Optional[str] = Query(None, description="Name, phone, VIN or model"),
    page: int = Query(1, ge=1),
    page_size: int = Query(25, ge=1, le=100),
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    return await ShippingService.find_all(db, status, shipment_month, search, page, page_size)


@router.get("/{form_id}", response_model=ShippingFormResponse)
async def get_shipping_form(
    form_id: int,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    return await ShippingService.find_one(db, form_id)


@router.patch("/{form_id}", response_model=ShippingFormResponse)
async def update_shipping_form(
    form_id: int,
    update_dto: UpdateShippingFormDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Update the form; the PDF is regenerated and the old one removed"""
    return await ShippingService.update(db, form_id, update_dto)


@router.post("/{form_id}/status", response_model=ShippingFormResponse)
async def toggle_shipping_form_status(
    form_id: int,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Toggle between pending and completed"""
    return await ShippingService.toggle_status(db, form_id)


@router.post("/{form_id}/documents", response_model=ShippingFormResponse)
async def upload_shipping_document(
    form_id: int,
    kind: DocumentKind = Query(...),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Upload a passport, ID card or vehicle photo"""
    return await ShippingService.upload_document(db, form_id, kind, file)


@router.get("/{form_id}/share", response_model=ShippingShareResponse)
async def share_shipping_form(
    form_id: int,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """WhatsApp message and link for the customer, plus the copy-info text"""
    return await ShippingService.share(db, form_id)


@router.delete("/{form_id}")
@skip_interceptor
async def delete_shipping_form(
    form_id: int,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_admin),
):
    """Delete a shipping form and its PDF (Admin only)"""
    await ShippingService.remove(db, form_id)
    return {"message": "Shipping form deleted successfully"}
