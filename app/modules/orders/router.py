"""Orders Router - order intake, status and shipping"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.engine import get_db_util
from app.core.response_interceptor import CustomAPIRoute, skip_interceptor
from app.modules.users.auth import TokenData, require_admin, require_any_role
from .service import OrdersService
from .schemas import (
    CreateOrderDto,
    UpdateOrderDto,
    OrderStatusUpdateDto,
    ShipOrderDto,
    OrderResponse,
    OrderListResponse,
    WhatsAppLinkResponse,
)

router = APIRouter(prefix="/orders", tags=["orders"], route_class=CustomAPIRoute)


@router.post("", response_model=OrderResponse, status_code=201)
async def create_order(
    create_dto: CreateOrderDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Create an order with the next WA-<year>-<seq> reference"""
    return await OrdersService.create(db, create_dto)


@router.get("", response_model=OrderListResponse)
async def get_orders(
    status: Optional[str] = Query(None, description="Any order status, or legacy 'completed'"),
    search: Optional[str] = Query(None, description="Reference, customer, phone or car"),
    page: int = Query(1, ge=1),
    page_size: int = Query(25, ge=1, le=100),
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    return await OrdersService.find_all(db, status, search, page, page_size)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    return await OrdersService.find_one(db, order_id)


@router.patch("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: int,
    update_dto: UpdateOrderDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    return await OrdersService.update(db, order_id, update_dto)


@router.post("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    status_dto: OrderStatusUpdateDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Any status except shipped; the change is appended to the status history"""
    return await OrdersService.update_status(db, order_id, status_dto.status, status_dto.note)


@router.post("/{order_id}/ship", response_model=OrderResponse)
async def ship_order(
    order_id: int,
    ship_dto: ShipOrderDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Mark as shipped with carrier, tracking number and route"""
    return await OrdersService.ship(db, order_id, ship_dto)


@router.get("/{order_id}/whatsapp", response_model=WhatsAppLinkResponse)
async def get_order_whatsapp_link(
    order_id: int,
    message: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """wa.me link to contact the customer"""
    return await OrdersService.contact_link(db, order_id, message)


@router.delete("/{order_id}")
@skip_interceptor
async def delete_order(
    order_id: int,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_admin),
):
    """Delete an order, releasing its car (Admin only)"""
    await OrdersService.remove(db, order_id)
    return {"message": "Order deleted successfully"}
