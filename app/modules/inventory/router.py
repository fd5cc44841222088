"""Inventory Router - stock cars, media, assignment and broadcast"""

from typing import Optional
from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.engine import get_db_util
from app.core.response_interceptor import CustomAPIRoute, skip_interceptor
from app.modules.users.auth import TokenData, require_admin, require_any_role
from .models import CarStatus
from .service import InventoryService
from .schemas import (
    CreateCarDto,
    UpdateCarDto,
    AssignCarDto,
    UnassignCarDto,
    ShareCarDto,
    MediaKind,
    CarResponse,
    CarListResponse,
    AssignCarResponse,
    UnassignCarResponse,
    ShareCarResponse,
)

router = APIRouter(prefix="/inventory", tags=["inventory"], route_class=CustomAPIRoute)


@router.post("", response_model=CarResponse, status_code=201)
async def create_car(
    create_dto: CreateCarDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    return await InventoryService.create(db, create_dto)


@router.get("", response_model=CarListResponse)
async def get_cars(
    status: Optional[CarStatus] = Query(None),
    search: Optional[str] = Query(None, description="Brand, model, VIN or location"),
    page: int = Query(1, ge=1),
    page_size: int = Query(25, ge=1, le=100),
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    return await InventoryService.find_all(db, status, search, page, page_size)


@router.get("/{car_id}", response_model=CarResponse)
async def get_car(
    car_id: int,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    return await InventoryService.find_one(db, car_id)


@router.patch("/{car_id}", response_model=CarResponse)
async def update_car(
    car_id: int,
    update_dto: UpdateCarDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    return await InventoryService.update(db, car_id, update_dto)


@router.post("/{car_id}/media", response_model=CarResponse)
async def upload_car_media(
    car_id: int,
    kind: MediaKind = Query(MediaKind.photo),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Upload a photo (appended) or the video (replaces the current one)"""
    return await InventoryService.upload_media(db, car_id, kind, file)


@router.post("/{car_id}/assign", response_model=AssignCarResponse)
async def assign_car(
    car_id: int,
    assign_dto: AssignCarDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """
    Reserve the car for an order, mark the order bought and record a pending
    Car Sale income. Problems with the last two come back as warnings.
    """
    return await InventoryService.assign(db, car_id, assign_dto.order_id)


@router.post("/{car_id}/unassign", response_model=UnassignCarResponse)
async def unassign_car(
    car_id: int,
    unassign_dto: UnassignCarDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Release the car (requires confirm=true); the order goes back to confirmed"""
    return await InventoryService.unassign(db, car_id, unassign_dto.confirm)


@router.post("/{car_id}/share", response_model=ShareCarResponse)
async def share_car(
    car_id: int,
    share_dto: ShareCarDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Car announcement and one WhatsApp link per selected order"""
    return await InventoryService.share(db, car_id, share_dto.order_ids)


@router.delete("/{car_id}")
@skip_interceptor
async def delete_car(
    car_id: int,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_admin),
):
    """Delete a car (Admin only)"""
    await InventoryService.remove(db, car_id)
    return {"message": "Car deleted successfully"}
