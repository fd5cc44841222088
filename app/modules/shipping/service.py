"""
Shipping Service - shipping forms, their PDF and the WhatsApp hand-off

Every create or edit renders a fresh PDF and uploads it under a new key;
the previous PDF blob is removed once the new URL is committed.
"""

import asyncio
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

from fastapi import UploadFile
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.core.images import WEBP_CONTENT_TYPE, compress_to_webp, webp_file_name
from app.core.pagination import paginate_query, build_paginated_response
from app.core.s3 import S3Service, discard_blob, save_with_blobs
from app.core.utils import current_month, now_ms, safe_file_name
from app.core.whatsapp import build_whatsapp_link
from .models import ShippingForm, ShippingFormStatus
from .pdf_generator import ShippingFormPDF
from .photos import parse_vehicle_photos, serialize_vehicle_photos
from .message import build_share_message, build_copy_text, build_pdf_share_message
from .schemas import (
    CreateShippingFormDto,
    UpdateShippingFormDto,
    DocumentKind,
    ShippingShareResponse,
)

logger = logging.getLogger(__name__)

# Thread pool for PDF rendering and blocking S3 calls
_executor = ThreadPoolExecutor(max_workers=2)

_DOCUMENT_FIELDS = {
    DocumentKind.passport_photo: "passport_photo_url",
    DocumentKind.id_card: "id_card_url",
    DocumentKind.id_card_back: "id_card_back_url",
}


class ShippingService:
    """Service for shipping forms"""

    @staticmethod
    async def _render_and_upload(form: ShippingForm) -> str:
        """
        Render the form to PDF and upload it under a new key.

        Returns:
            str: public URL of the uploaded PDF
        """
        loop = asyncio.get_event_loop()
        pdf_bytes: bytes = await loop.run_in_executor(
            _executor, ShippingFormPDF.generate_shipping_pdf, form
        )

        file_key = f"shipping/shipping_form_{safe_file_name(form.name)}_{now_ms()}_{uuid.uuid4().hex[:8]}.pdf"
        pdf_url, _ = await loop.run_in_executor(
            _executor,
            S3Service.upload_file,
            pdf_bytes,
            file_key,
            "application/pdf",
            {"customer": form.name},
        )
        return pdf_url

    @staticmethod
    async def find_all(
        db: AsyncSession,
        status: Optional[ShippingFormStatus] = None,
        shipment_month: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 25,
    ) -> Dict[str, Any]:
        """List forms, newest first, filtered by status, month and a free-text search."""
        query = select(ShippingForm)

        if status:
            query = query.where(ShippingForm.status == status)
        if shipment_month:
            query = query.where(ShippingForm.shipment_month == shipment_month)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    ShippingForm.name.ilike(pattern),
                    ShippingForm.phone.ilike(pattern),
                    ShippingForm.vin_number.ilike(pattern),
                    ShippingForm.vehicle_model.ilike(pattern),
                )
            )

        query = query.order_by(ShippingForm.created_at.desc(), ShippingForm.id.desc())
        items, total = await paginate_query(db, query, page, page_size)
        return build_paginated_response(items, total, page, page_size)

    @staticmethod
    async def find_one(db: AsyncSession, form_id: int) -> ShippingForm:
        """
        Raises:
            NotFoundError: If form not found
        """
        form = await db.scalar(select(ShippingForm).where(ShippingForm.id == form_id))
        if not form:
            raise NotFoundError("Shipping form", form_id)
        return form

    @staticmethod
    async def find_by_vin(db: AsyncSession, vin: str) -> Optional[ShippingForm]:
        result = await db.execute(
            select(ShippingForm).where(ShippingForm.vin_number == vin).limit(1)
        )
        return result.scalars().first()

    @staticmethod
    async def create(db: AsyncSession, create_dto: CreateShippingFormDto) -> ShippingForm:
        """
        Create a form and its PDF.

        Raises:
            ExternalServiceError: If the PDF upload fails (nothing is written)
        """
        data = create_dto.model_dump()
        data["vehicle_photos_urls"] = serialize_vehicle_photos(data["vehicle_photos_urls"])
        data["shipment_month"] = data["shipment_month"] or current_month()

        form = ShippingForm(**data)
        form.pdf_url = await ShippingService._render_and_upload(form)

        db.add(form)
        await save_with_blobs(db, form.pdf_url)
        await db.refresh(form)

        logger.info(f"Shipping form {form.id} created for {form.name}")
        return form

    @staticmethod
    async def update(
        db: AsyncSession, form_id: int, update_dto: UpdateShippingFormDto
    ) -> ShippingForm:
        """Apply the sent fields, then regenerate the PDF."""
        form = await ShippingService.find_one(db, form_id)

        update_data = update_dto.model_dump(exclude_unset=True)
        if "vehicle_photos_urls" in update_data:
            update_data["vehicle_photos_urls"] = serialize_vehicle_photos(
                update_data["vehicle_photos_urls"]
            )
        for key, value in update_data.items():
            setattr(form, key, value)

        return await ShippingService._refresh_pdf(db, form)

    @staticmethod
    async def _refresh_pdf(
        db: AsyncSession, form: ShippingForm, *uploaded_urls: str
    ) -> ShippingForm:
        """
        Upload a fresh PDF and commit the form. The previous PDF is removed only
        after the commit; a failed commit removes the new PDF and `uploaded_urls`.
        """
        previous_pdf_url = form.pdf_url
        form.pdf_url = await ShippingService._render_and_upload(form)

        await save_with_blobs(db, form.pdf_url, *uploaded_urls)
        await db.refresh(form)

        if previous_pdf_url != form.pdf_url:
            await discard_blob(previous_pdf_url)
        return form

    @staticmethod
    async def toggle_status(db: AsyncSession, form_id: int) -> ShippingForm:
        """pending <-> completed"""
        form = await ShippingService.find_one(db, form_id)
        form.status = (
            ShippingFormStatus.pending
            if form.status == ShippingFormStatus.completed
            else ShippingFormStatus.completed
        )
        await db.flush()
        await db.refresh(form)
        return form

    @staticmethod
    async def upload_document(
        db: AsyncSession, form_id: int, kind: DocumentKind, file: UploadFile
    ) -> ShippingForm:
        """
        Store a passport, ID card or vehicle photo and attach its URL.
        Vehicle photos are appended, document photos replace the previous one.
        Vehicle photos are compressed to WebP first.
        """
        form = await ShippingService.find_one(db, form_id)
        content = await file.read()
        if not content:
            raise ValidationError("Uploaded file is empty")

        file_name = file.filename or "file"
        content_type = file.content_type or "application/octet-stream"
        loop = asyncio.get_event_loop()
        if kind == DocumentKind.vehicle_photo:
            content = await loop.run_in_executor(_executor, compress_to_webp, content)
            file_name = webp_file_name(file_name)
            content_type = WEBP_CONTENT_TYPE

        file_key = f"documents/{form.id}/{kind.value}_{now_ms()}_{uuid.uuid4().hex[:8]}_{safe_file_name(file_name)}"
        file_url, _ = await loop.run_in_executor(
            _executor, S3Service.upload_file, content, file_key, content_type, None
        )

        if kind == DocumentKind.vehicle_photo:
            photos = parse_vehicle_photos(form.vehicle_photos_urls)
            photos.append(file_url)
            form.vehicle_photos_urls = serialize_vehicle_photos(photos)
        else:
            setattr(form, _DOCUMENT_FIELDS[kind], file_url)

        return await ShippingService._refresh_pdf(db, form, file_url)

    @staticmethod
    async def remove(db: AsyncSession, form_id: int) -> None:
        """Delete the form, then its PDF once the delete is committed."""
        form = await ShippingService.find_one(db, form_id)
        pdf_url = form.pdf_url

        await db.delete(form)
        await db.flush()
        await db.commit()

        await discard_blob(pdf_url)

    @staticmethod
    async def share(db: AsyncSession, form_id: int) -> ShippingShareResponse:
        """Message, wa.me link and copy text for one form."""
        form = await ShippingService.find_one(db, form_id)
        message = build_share_message(form)

        return ShippingShareResponse(
            message=message,
            whatsapp_url=build_whatsapp_link(form.phone, message),
            copy_text=build_copy_text(form),
            pdf_share_url=(
                build_whatsapp_link(None, build_pdf_share_message(form))
                if form.pdf_url
                else None
            ),
        )

    @staticmethod
    async def create_from_transaction(db: AsyncSession, transaction: Any) -> Optional[ShippingForm]:
        """
        Spawn a completed shipping form from a newly saved transaction.

        Skipped (returns None) without customer name and phone, or when a form
        already exists for the car's VIN.
        """
        if not (transaction.customer_name and transaction.customer_phone):
            return None

        if transaction.car_vin:
            existing = await ShippingService.find_by_vin(db, transaction.car_vin)
            if existing:
                logger.info(
                    f"Shipping form already exists for VIN {transaction.car_vin}, skipping creation"
                )
                return None

        form = ShippingForm(
            name=transaction.customer_name,
            phone=transaction.customer_phone,
            email=transaction.customer_email or "",
            address=transaction.customer_address or "",
            passport_number=transaction.passport_number or "",
            id_card_number=transaction.customer_id_card or "",
            code_postal=transaction.customer_postal_code or "",
            zip_number="",
            vehicle_model=f"{transaction.car_brand or ''} {transaction.car_model or ''}".strip(),
            vin_number=transaction.car_vin or "",
            notes=transaction.description or "",
            passport_photo_url=transaction.passport_photo_url,
            id_card_url=transaction.id_card_url,
            id_card_back_url=transaction.id_card_back_url,
            vehicle_photos_urls=serialize_vehicle_photos(transaction.vehicle_photos_urls),
            status=ShippingFormStatus.completed,
            shipment_month=current_month(),
            related_transaction_id=transaction.id,
        )
        form.pdf_url = await ShippingService._render_and_upload(form)

        # Runs inside the caller's savepoint, the caller's request commits
        db.add(form)
        await save_with_blobs(db, form.pdf_url, commit=False)
        await db.refresh(form)

        logger.info(f"Shipping form {form.id} created from transaction {transaction.id}")
        return form
