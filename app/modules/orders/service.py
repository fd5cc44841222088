"""
Orders Service - order intake and status changes

Status rules live in status.py; this service loads and stores orders
around them.
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.core.pagination import paginate_query, build_paginated_response
from app.core.whatsapp import build_whatsapp_link, normalize_phone
from app.modules.inventory.models import Car
from app.modules.inventory.service import InventoryService
from .models import Order
from .schemas import (
    CreateOrderDto,
    UpdateOrderDto,
    ShipOrderDto,
    WhatsAppLinkResponse,
)
from .status import (
    OrderStatus,
    READABLE_STATUSES,
    ShippingDetails,
    apply_shipment,
    apply_status,
    build_intake_order_data,
    latest_reference,
    next_reference_number,
)

logger = logging.getLogger(__name__)


class OrdersService:
    """Service for customer orders"""

    @staticmethod
    async def _next_reference(db: AsyncSession, year: int) -> str:
        references = await db.scalars(
            select(Order.reference_number).where(Order.reference_number.like(f"WA-{year}-%"))
        )
        return next_reference_number(latest_reference(references.all(), year), year)

    @staticmethod
    async def create(db: AsyncSession, create_dto: CreateOrderDto) -> Order:
        """
        Register an order from the dashboard.

        The phone is stored as digits only; the snapshot in order_data keeps
        the wa.me form of it.

        Raises:
            ValidationError: If the phone has no digits
        """
        phone = re.sub(r"\D", "", create_dto.customer_phone)
        if not phone:
            raise ValidationError("Customer phone must contain digits")

        now = datetime.now()
        reference_number = await OrdersService._next_reference(db, now.year)

        order_data = build_intake_order_data(
            reference_number,
            customer={
                "name": create_dto.customer_name,
                "phone": phone,
                "email": create_dto.customer_email,
                "wilaya": create_dto.customer_wilaya,
                "id_card": create_dto.customer_id_card,
            },
            car={
                "brand": create_dto.car_brand,
                "model": create_dto.car_model,
                "budget": create_dto.car_budget,
                "custom_budget": create_dto.car_custom_budget,
            },
            notes=create_dto.notes,
            now=now,
            whatsapp_phone=normalize_phone(phone),
        )

        order = Order(
            **create_dto.model_dump(exclude={"customer_phone"}),
            customer_phone=phone,
            reference_number=reference_number,
            status=OrderStatus.pending.value,
            order_data=order_data,
        )
        db.add(order)
        await db.flush()
        await db.refresh(order)

        logger.info(f"Order {reference_number} created for {order.customer_name}")
        return order

    @staticmethod
    async def find_all(
        db: AsyncSession,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 25,
    ) -> Dict[str, Any]:
        """
        List orders, newest first.

        Raises:
            ValidationError: If status is not a known (or legacy) status
        """
        query = select(Order)

        if status:
            if status not in READABLE_STATUSES:
                raise ValidationError(f"Unknown order status: {status}")
            query = query.where(Order.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Order.reference_number.ilike(pattern),
                    Order.customer_name.ilike(pattern),
                    Order.customer_phone.ilike(pattern),
                    Order.car_brand.ilike(pattern),
                    Order.car_model.ilike(pattern),
                )
            )

        query = query.order_by(Order.created_at.desc(), Order.id.desc())
        items, total = await paginate_query(db, query, page, page_size)
        return build_paginated_response(items, total, page, page_size)

    @staticmethod
    async def find_one(db: AsyncSession, order_id: int) -> Order:
        """
        Raises:
            NotFoundError: If order not found
        """
        order = await db.scalar(select(Order).where(Order.id == order_id))
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    @staticmethod
    async def update(db: AsyncSession, order_id: int, update_dto: UpdateOrderDto) -> Order:
        order = await OrdersService.find_one(db, order_id)

        update_data = update_dto.model_dump(exclude_unset=True)
        if "customer_phone" in update_data:
            phone = re.sub(r"\D", "", update_data["customer_phone"] or "")
            if not phone:
                raise ValidationError("Customer phone must contain digits")
            update_data["customer_phone"] = phone

        for key, value in update_data.items():
            setattr(order, key, value)

        await db.flush()
        await db.refresh(order)
        return order

    @staticmethod
    async def update_status(
        db: AsyncSession, order_id: int, status: OrderStatus, note: Optional[str] = None
    ) -> Order:
        """
        Move an order to any status except shipped.

        Raises:
            ValidationError: For shipped, which needs the shipping details
        """
        if status == OrderStatus.shipped:
            raise ValidationError("Use POST /api/orders/{id}/ship to mark an order as shipped")

        order = await OrdersService.find_one(db, order_id)
        order.order_data = apply_status(order.order_data, status.value, datetime.now(), note)
        order.status = status.value

        await db.flush()
        await db.refresh(order)
        logger.info(f"Order {order.reference_number} moved to {status.value}")
        return order

    @staticmethod
    async def ship(db: AsyncSession, order_id: int, ship_dto: ShipOrderDto) -> Order:
        """
        Mark an order as shipped with its carrier and tracking details.

        Raises:
            ValidationError: Unknown carrier, or CIG without the VIN suffix
        """
        order = await OrdersService.find_one(db, order_id)
        details = ShippingDetails(**ship_dto.model_dump())

        order.order_data = apply_shipment(order.order_data, details, datetime.now())
        order.status = OrderStatus.shipped.value

        await db.flush()
        await db.refresh(order)
        logger.info(f"Order {order.reference_number} shipped ({details.carrier or 'no carrier'})")
        return order

    @staticmethod
    async def remove(db: AsyncSession, order_id: int) -> None:
        """Delete an order; a car it held goes back on sale."""
        order = await OrdersService.find_one(db, order_id)

        result = await db.execute(
            select(Car).where(
                or_(Car.assigned_to_order == order.id, Car.id == order.assigned_car_id)
            )
        )
        for car in result.scalars().all():
            if car.assigned_to_order == order.id:
                await InventoryService.release(db, car)
                logger.info(f"Car {car.id} released by deletion of order {order.reference_number}")

        await db.delete(order)
        await db.flush()

    @staticmethod
    async def contact_link(
        db: AsyncSession, order_id: int, message: Optional[str] = None
    ) -> WhatsAppLinkResponse:
        order = await OrdersService.find_one(db, order_id)
        return WhatsAppLinkResponse(
            phone=normalize_phone(order.customer_phone),
            whatsapp_url=build_whatsapp_link(order.customer_phone, message),
        )
