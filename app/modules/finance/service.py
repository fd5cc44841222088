"""
Finance Service - financial transactions

Create and update run the same checks and derivations as the form: local
validation first, then car_buying_price recompute, paid_amount resolution and
the description overflow encoding. A new transaction with customer name and
phone also gets a shipping form, on a best-effort basis.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.core.pagination import paginate_query, build_paginated_response
from app.core.utils import parse_number
from app.modules.settings.service import SettingsService
from app.modules.shipping.photos import serialize_vehicle_photos
from app.modules.shipping.service import ShippingService
from .models import FinancialTransaction, TransactionType, TransactionCategory, PaymentStatus, Currency
from .derivation import (
    FinancialSummary,
    buying_price_inputs,
    derive_financials,
    resolve_paid_amount,
    validate_transaction_form,
)
from .description import DescriptionExtras, decode_description, encode_description
from .schemas import (
    TransactionFormDto,
    TransactionResponse,
    TransactionDetailResponse,
    FinancialSummaryResponse,
)

logger = logging.getLogger(__name__)


class FinanceService:
    """Service for financial transactions"""

    @staticmethod
    async def _with_saved_rates(db: AsyncSession, form: TransactionFormDto) -> TransactionFormDto:
        """Fill blank exchange rates with the ones saved in settings."""
        if parse_number(form.exchange_rate_dzd_usdt) is not None and parse_number(
            form.exchange_rate_usdt_krw
        ) is not None:
            return form

        rates = await SettingsService.get_transaction_rates(db)
        updates = {}
        if parse_number(form.exchange_rate_dzd_usdt) is None and rates.exchange_rate_dzd_usdt:
            updates["exchange_rate_dzd_usdt"] = rates.exchange_rate_dzd_usdt
        if parse_number(form.exchange_rate_usdt_krw) is None and rates.exchange_rate_usdt_krw:
            updates["exchange_rate_usdt_krw"] = rates.exchange_rate_usdt_krw
        return form.model_copy(update=updates)

    @staticmethod
    async def preview(db: AsyncSession, form: TransactionFormDto) -> FinancialSummary:
        """Derived values for a form that is still being filled, nothing is written."""
        form = await FinanceService._with_saved_rates(db, form)
        return derive_financials(form)

    @staticmethod
    def _apply_form(
        transaction: FinancialTransaction, form: TransactionFormDto, recompute_price: bool = True
    ) -> None:
        """
        Copy a validated form onto a transaction row.

        Without recompute_price the typed car_buying_price is stored as is.
        """
        amount = validate_transaction_form(form)
        summary = derive_financials(form, recompute_price=recompute_price)

        transaction.type = form.type
        transaction.category = form.category
        transaction.amount = amount
        transaction.currency = form.currency
        transaction.payment_status = form.payment_status
        transaction.payment_method = form.payment_method
        transaction.paid_amount = resolve_paid_amount(form.payment_status, amount, form.paid_amount)
        transaction.transaction_date = form.transaction_date
        transaction.description = encode_description(
            form.description,
            DescriptionExtras(
                related_order_number=form.related_order_number or "",
                customer_id_card=form.customer_id_card or "",
                customer_address=form.customer_address or "",
                notes=form.notes or "",
            ),
        )

        transaction.seller_name = form.seller_name or None
        transaction.buyer_name = form.buyer_name or None
        transaction.seller_commission = parse_number(form.seller_commission)
        transaction.buyer_commission = parse_number(form.buyer_commission)
        transaction.bureau_commission = parse_number(form.bureau_commission)

        transaction.car_brand = form.car_brand or None
        transaction.car_model = form.car_model or None
        transaction.car_year = str(form.car_year) if form.car_year else None
        transaction.car_color = form.car_color or None
        transaction.car_vin = form.car_vin or None
        transaction.car_mileage = parse_number(form.car_mileage)
        transaction.car_buying_price = summary.car_buying_price
        transaction.shipping_price = parse_number(form.shipping_price)

        transaction.buying_currency = form.buying_currency or None
        transaction.original_buying_price = parse_number(form.original_buying_price)
        transaction.exchange_rate_dzd_usdt = parse_number(form.exchange_rate_dzd_usdt)
        transaction.exchange_rate_usdt_krw = parse_number(form.exchange_rate_usdt_krw)
        transaction.is_paid_in_korea = form.is_paid_in_korea
        transaction.paid_in_korea_date = (
            (form.paid_in_korea_date or datetime.now()) if form.is_paid_in_korea else None
        )

        transaction.customer_name = form.customer_name or None
        transaction.customer_phone = form.customer_phone or None
        transaction.customer_email = form.customer_email or None
        transaction.customer_address = form.customer_address or None
        transaction.customer_postal_code = form.customer_postal_code or None
        transaction.customer_id_card = form.customer_id_card or None

        transaction.passport_number = form.passport_number or None
        transaction.passport_photo_url = form.passport_photo_url or None
        transaction.id_card_url = form.id_card_url or None
        transaction.id_card_back_url = form.id_card_back_url or None
        transaction.vehicle_photos_urls = serialize_vehicle_photos(form.vehicle_photos_urls)

        # Links set by car assignment survive edits that do not send them
        if form.related_order_id is not None:
            transaction.related_order_id = form.related_order_id
        if form.related_car_id is not None:
            transaction.related_car_id = form.related_car_id

    @staticmethod
    async def create(db: AsyncSession, form: TransactionFormDto) -> FinancialTransaction:
        """
        Create a transaction.

        Raises:
            ValidationError: If the form fails local validation (nothing is written)
        """
        form = await FinanceService._with_saved_rates(db, form)

        transaction = FinancialTransaction()
        FinanceService._apply_form(transaction, form)

        db.add(transaction)
        await db.flush()
        await db.refresh(transaction)
        logger.info(f"Transaction {transaction.id} created ({transaction.category.value}, {transaction.amount})")

        if transaction.customer_name and transaction.customer_phone:
            await FinanceService._spawn_shipping_form(db, transaction)
            await db.refresh(transaction)

        return transaction

    @staticmethod
    async def _spawn_shipping_form(db: AsyncSession, transaction: FinancialTransaction) -> None:
        """Create the linked shipping form; a failure is logged and never blocks the transaction."""
        try:
            async with db.begin_nested():
                await ShippingService.create_from_transaction(db, transaction)
        except Exception:
            logger.exception(f"Error auto-creating shipping form for transaction {transaction.id}")

    @staticmethod
    async def create_car_sale(
        db: AsyncSession,
        amount: float,
        currency: str,
        description: str,
        related_order_id: int,
        related_car_id: int,
        car_fields: Optional[Dict[str, Any]] = None,
    ) -> FinancialTransaction:
        """Pending Car Sale income recorded when a car is assigned to an order."""
        transaction = FinancialTransaction(
            type=TransactionType.Income,
            category=TransactionCategory.CAR_SALE,
            amount=amount,
            currency=Currency(currency),
            paid_amount=0.0,
            payment_status=PaymentStatus.Pending,
            description=description,
            transaction_date=datetime.now().date(),
            related_order_id=related_order_id,
            related_car_id=related_car_id,
            **(car_fields or {}),
        )
        db.add(transaction)
        await db.flush()
        await db.refresh(transaction)
        return transaction

    @staticmethod
    async def delete_for_pairing(db: AsyncSession, car_id: int, order_id: int) -> int:
        """
        Delete the transactions created from one car/order pairing.

        Returns:
            int: number of deleted rows
        """
        result = await db.execute(
            select(FinancialTransaction).where(
                FinancialTransaction.related_car_id == car_id,
                FinancialTransaction.related_order_id == order_id,
            )
        )
        transactions = list(result.scalars().all())
        for transaction in transactions:
            await db.delete(transaction)
        await db.flush()
        return len(transactions)

    @staticmethod
    async def find_all(
        db: AsyncSession,
        type: Optional[TransactionType] = None,
        category: Optional[TransactionCategory] = None,
        payment_status: Optional[PaymentStatus] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 25,
    ) -> Dict[str, Any]:
        """List transactions, newest date first."""
        query = select(FinancialTransaction)

        if type:
            query = query.where(FinancialTransaction.type == type)
        if category:
            query = query.where(FinancialTransaction.category == category)
        if payment_status:
            query = query.where(FinancialTransaction.payment_status == payment_status)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    FinancialTransaction.description.ilike(pattern),
                    FinancialTransaction.customer_name.ilike(pattern),
                    FinancialTransaction.car_vin.ilike(pattern),
                    FinancialTransaction.car_brand.ilike(pattern),
                    FinancialTransaction.car_model.ilike(pattern),
                )
            )

        query = query.order_by(
            FinancialTransaction.transaction_date.desc(), FinancialTransaction.id.desc()
        )
        items, total = await paginate_query(db, query, page, page_size)
        return build_paginated_response(items, total, page, page_size)

    @staticmethod
    async def find_one(db: AsyncSession, transaction_id: int) -> FinancialTransaction:
        """
        Raises:
            NotFoundError: If transaction not found
        """
        transaction = await db.scalar(
            select(FinancialTransaction).where(FinancialTransaction.id == transaction_id)
        )
        if not transaction:
            raise NotFoundError("Transaction", transaction_id)
        return transaction

    @staticmethod
    def to_detail(transaction: FinancialTransaction) -> TransactionDetailResponse:
        """Detail payload with the description overflow decoded and the summary derived."""
        base_description, extras = decode_description(transaction.description)
        summary = derive_financials(transaction, recompute_price=False)

        return TransactionDetailResponse(
            **TransactionResponse.model_validate(transaction).model_dump(),
            base_description=base_description,
            related_order_number=extras.related_order_number,
            notes=extras.notes,
            summary=FinancialSummaryResponse.model_validate(summary),
        )

    @staticmethod
    async def find_detail(db: AsyncSession, transaction_id: int) -> TransactionDetailResponse:
        transaction = await FinanceService.find_one(db, transaction_id)
        return FinanceService.to_detail(transaction)

    @staticmethod
    async def update(
        db: AsyncSession, transaction_id: int, form: TransactionFormDto
    ) -> FinancialTransaction:
        """
        Replace a transaction with the re-submitted form.

        car_buying_price is only recomputed when its buying currency, original
        price or one of the rates changed; otherwise the sent value is kept.

        Raises:
            NotFoundError: If transaction not found
            ValidationError: If the form fails local validation
        """
        transaction = await FinanceService.find_one(db, transaction_id)
        form = await FinanceService._with_saved_rates(db, form)

        recompute_price = buying_price_inputs(form) != buying_price_inputs(transaction)
        FinanceService._apply_form(transaction, form, recompute_price)

        await db.flush()
        await db.refresh(transaction)
        return transaction

    @staticmethod
    async def remove(db: AsyncSession, transaction_id: int) -> None:
        transaction = await FinanceService.find_one(db, transaction_id)
        await db.delete(transaction)
        await db.flush()
