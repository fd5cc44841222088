"""
Inventory Service - stock cars, their media and car/order assignment

Assignment is two-sided: Car.assigned_to_order/status and
Order.assigned_car_id/status always change in the same unit of work.
"""

import asyncio
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import UploadFile
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.images import WEBP_CONTENT_TYPE, compress_to_webp, webp_file_name
from app.core.pagination import paginate_query, build_paginated_response
from app.core.s3 import S3Service, discard_blob, save_with_blobs
from app.core.utils import now_ms, safe_file_name
from app.core.whatsapp import build_whatsapp_link, normalize_phone
from app.modules.finance.service import FinanceService
from app.modules.orders.models import Order
from app.modules.orders.status import OrderStatus, CLOSED_STATUSES, apply_status
from app.modules.shipping.photos import parse_vehicle_photos, serialize_vehicle_photos
from .message import build_car_message
from .models import Car, CarStatus
from .schemas import (
    CreateCarDto,
    UpdateCarDto,
    MediaKind,
    AssignCarResponse,
    UnassignCarResponse,
    ShareCarResponse,
    ShareLink,
    CarResponse,
)

logger = logging.getLogger(__name__)

# Thread pool for blocking S3 calls
_executor = ThreadPoolExecutor(max_workers=2)


class InventoryService:
    """Service for inventory cars"""

    @staticmethod
    def _to_columns(data: Dict[str, Any]) -> Dict[str, Any]:
        if "photos_urls" in data:
            data["photos_urls"] = serialize_vehicle_photos(data["photos_urls"])
        if data.get("currency") is not None:
            data["currency"] = getattr(data["currency"], "value", data["currency"])
        return data

    @staticmethod
    async def create(db: AsyncSession, create_dto: CreateCarDto) -> Car:
        car = Car(**InventoryService._to_columns(create_dto.model_dump()))
        db.add(car)
        await db.flush()
        await db.refresh(car)
        return car

    @staticmethod
    async def find_all(
        db: AsyncSession,
        status: Optional[CarStatus] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 25,
    ) -> Dict[str, Any]:
        """List cars, newest first."""
        query = select(Car)

        if status:
            query = query.where(Car.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Car.brand.ilike(pattern),
                    Car.model.ilike(pattern),
                    Car.vin.ilike(pattern),
                    Car.location.ilike(pattern),
                )
            )

        query = query.order_by(Car.created_at.desc(), Car.id.desc())
        items, total = await paginate_query(db, query, page, page_size)
        return build_paginated_response(items, total, page, page_size)

    @staticmethod
    async def find_one(db: AsyncSession, car_id: int) -> Car:
        """
        Raises:
            NotFoundError: If car not found
        """
        car = await db.scalar(select(Car).where(Car.id == car_id))
        if not car:
            raise NotFoundError("Car", car_id)
        return car

    @staticmethod
    async def update(db: AsyncSession, car_id: int, update_dto: UpdateCarDto) -> Car:
        car = await InventoryService.find_one(db, car_id)

        update_data = InventoryService._to_columns(update_dto.model_dump(exclude_unset=True))
        for key, value in update_data.items():
            setattr(car, key, value)

        await db.flush()
        await db.refresh(car)
        return car

    @staticmethod
    async def remove(db: AsyncSession, car_id: int) -> None:
        """
        Delete a car.

        Raises:
            ConflictError: If an order still holds the car
        """
        car = await InventoryService.find_one(db, car_id)
        if car.assigned_to_order:
            raise ConflictError(
                f"Car {car_id} is assigned to order {car.assigned_to_order}, unassign it first"
            )

        await db.delete(car)
        await db.flush()

    @staticmethod
    async def upload_media(
        db: AsyncSession, car_id: int, kind: MediaKind, file: UploadFile
    ) -> Car:
        """
        Store a photo (appended) or the video (replaced) of a car.
        Photos are compressed to WebP before upload. A replaced video blob is
        deleted only after the new URL is committed.

        Raises:
            ValidationError: On an empty upload or a photo that is not an image
            ExternalServiceError: If storage fails
        """
        car = await InventoryService.find_one(db, car_id)
        content = await file.read()
        if not content:
            raise ValidationError("Uploaded file is empty")

        file_name = file.filename or kind.value
        content_type = file.content_type or "application/octet-stream"
        loop = asyncio.get_event_loop()
        if kind == MediaKind.photo:
            content = await loop.run_in_executor(_executor, compress_to_webp, content)
            file_name = webp_file_name(file_name)
            content_type = WEBP_CONTENT_TYPE

        file_key = f"car-media/{car.id}/{now_ms()}_{uuid.uuid4().hex[:8]}_{safe_file_name(file_name)}"
        file_url, _ = await loop.run_in_executor(
            _executor,
            S3Service.upload_file,
            content,
            file_key,
            content_type,
            {"car_id": str(car.id)},
        )

        previous_video = None
        if kind == MediaKind.photo:
            photos = parse_vehicle_photos(car.photos_urls)
            photos.append(file_url)
            car.photos_urls = serialize_vehicle_photos(photos)
        else:
            previous_video = car.video_url
            car.video_url = file_url

        await save_with_blobs(db, file_url)
        await db.refresh(car)

        # Only once the new URL is committed
        if previous_video and previous_video != file_url:
            await discard_blob(previous_video)

        return car

    @staticmethod
    async def _find_order(db: AsyncSession, order_id: int) -> Order:
        order = await db.scalar(select(Order).where(Order.id == order_id))
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    @staticmethod
    def _sale_description(car: Car, order: Order) -> str:
        customer_info = (order.order_data or {}).get("customerInfo") or {}
        id_card = order.customer_id_card or customer_info.get("idCard") or ""
        address = (order.order_data or {}).get("address") or order.customer_wilaya or ""

        description = f"Car Sale: {car.year or ''} {car.brand} {car.model}"
        if order.customer_name:
            description += f"\nCustomer: {order.customer_name}"
        if id_card:
            description += f"\nID Card: {id_card}"
        if address:
            description += f"\nAddress: {address}"
        return description

    @staticmethod
    async def assign(db: AsyncSession, car_id: int, order_id: int) -> AssignCarResponse:
        """
        Assign a car to an order.

        The car becomes reserved. The order update (bought + car pointer) and
        the pending Car Sale income each run in their own savepoint: a failure
        there is reported as a warning and does not undo the car side.

        Raises:
            ConflictError: If the car or the order is already paired, or the order is closed
        """
        car = await InventoryService.find_one(db, car_id)
        order = await InventoryService._find_order(db, order_id)

        if car.assigned_to_order:
            raise ConflictError(f"Car {car.id} is already assigned to order {car.assigned_to_order}")
        if order.status in CLOSED_STATUSES:
            raise ConflictError(f"Order {order.reference_number} is {order.status}")
        if order.assigned_car_id:
            raise ConflictError(
                f"Order {order.reference_number} already holds car {order.assigned_car_id}"
            )

        # Read everything needed from the order before any savepoint can expire it
        order_id = order.id
        description = InventoryService._sale_description(car, order)
        car_fields = {
            "car_brand": car.brand,
            "car_model": car.model,
            "car_year": str(car.year) if car.year else None,
            "car_vin": car.vin,
            "customer_name": order.customer_name,
            "customer_phone": order.customer_phone,
        }

        car.assigned_to_order = order_id
        car.status = CarStatus.reserved
        await db.flush()

        warnings: List[str] = []

        try:
            async with db.begin_nested():
                now = datetime.now()
                order.order_data = apply_status(order.order_data, OrderStatus.bought.value, now)
                order.status = OrderStatus.bought.value
                order.assigned_car_id = car.id
        except Exception as e:
            logger.error(f"Order update failed while assigning car {car.id}: {e}")
            warnings.append(f"Order status update failed: {e}")

        transaction_id = None
        try:
            async with db.begin_nested():
                transaction = await FinanceService.create_car_sale(
                    db,
                    amount=car.selling_price or 0.0,
                    currency=car.currency or "DZD",
                    description=description,
                    related_order_id=order_id,
                    related_car_id=car.id,
                    car_fields=car_fields,
                )
                transaction_id = transaction.id
        except Exception as e:
            logger.error(f"Transaction creation failed while assigning car {car.id}: {e}")
            warnings.append(f"Car assigned, but transaction failed: {e}")

        await db.refresh(car)
        logger.info(f"Car {car.id} assigned to order {order_id}")

        return AssignCarResponse(
            car=CarResponse.model_validate(car),
            order_id=order_id,
            transaction_id=transaction_id,
            warnings=warnings,
        )

    @staticmethod
    async def release(db: AsyncSession, car: Car) -> None:
        """Put a car back on sale, clearing its order pointer."""
        car.assigned_to_order = None
        car.status = CarStatus.available
        await db.flush()

    @staticmethod
    async def unassign(db: AsyncSession, car_id: int, confirm: bool) -> UnassignCarResponse:
        """
        Release a car from its order.

        Car back to available and order back to confirmed are written together.
        The sale transaction of that exact car/order pairing is then deleted in
        a savepoint; if that fails it is logged and the unassign still stands.

        Raises:
            ValidationError: Without confirmation (nothing is written)
            ConflictError: If the car is not assigned
        """
        if not confirm:
            raise ValidationError("Unassign must be confirmed")

        car = await InventoryService.find_one(db, car_id)
        order_id = car.assigned_to_order
        if not order_id:
            raise ConflictError(f"Car {car.id} is not assigned to any order")

        order = await db.scalar(select(Order).where(Order.id == order_id))
        await InventoryService.release(db, car)
        if order:
            order.status = OrderStatus.confirmed.value
            order.assigned_car_id = None
            order.order_data = apply_status(order.order_data, OrderStatus.confirmed.value, datetime.now())
            await db.flush()

        deleted = 0
        try:
            async with db.begin_nested():
                deleted = await FinanceService.delete_for_pairing(db, car.id, order_id)
        except Exception:
            logger.exception(f"Could not delete transactions of car {car.id} / order {order_id}")

        await db.refresh(car)
        logger.info(f"Car {car.id} unassigned from order {order_id}")

        return UnassignCarResponse(
            car=CarResponse.model_validate(car),
            order_id=order_id,
            deleted_transactions=deleted,
        )

    @staticmethod
    async def share(db: AsyncSession, car_id: int, order_ids: List[int]) -> ShareCarResponse:
        """One wa.me link per selected order that has a phone number."""
        car = await InventoryService.find_one(db, car_id)
        message = build_car_message(car)

        result = await db.execute(select(Order).where(Order.id.in_(order_ids)))
        orders = {order.id: order for order in result.scalars().all()}

        links: List[ShareLink] = []
        skipped: List[int] = []
        for order_id in order_ids:
            order = orders.get(order_id)
            if not order or not order.customer_phone:
                skipped.append(order_id)
                continue
            links.append(
                ShareLink(
                    order_id=order.id,
                    customer_name=order.customer_name,
                    phone=normalize_phone(order.customer_phone),
                    whatsapp_url=build_whatsapp_link(order.customer_phone, message),
                )
            )

        return ShareCarResponse(message=message, links=links, skipped_order_ids=skipped)
