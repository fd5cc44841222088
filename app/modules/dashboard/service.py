"""
DashboardService - Business logic for aggregating dashboard data.
"""

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from .schemas import (
    DashboardResponse,
    DashboardStatsResponse,
    DashboardFinancialOverviewResponse,
    DashboardTransactionResponse,
)
from app.modules.orders.models import Order
from app.modules.orders.status import READABLE_STATUSES
from app.modules.inventory.models import Car, CarStatus
from app.modules.shipping.models import ShippingForm, ShippingFormStatus
from app.modules.finance.models import FinancialTransaction, TransactionType


class DashboardService:
    """Dashboard service for aggregating all dashboard data"""

    @staticmethod
    async def get_dashboard_data(db: AsyncSession) -> DashboardResponse:
        """
        Get all dashboard data: counts, order status breakdown, financial
        overview and the latest transactions.
        """
        # 1. Basic counts
        total_orders = await db.scalar(select(func.count(Order.id))) or 0
        total_cars = await db.scalar(select(func.count(Car.id))) or 0
        available_cars = await db.scalar(
            select(func.count(Car.id)).where(Car.status == CarStatus.available)
        ) or 0
        total_shipping_forms = await db.scalar(select(func.count(ShippingForm.id))) or 0
        pending_shipping_forms = await db.scalar(
            select(func.count(ShippingForm.id)).where(
                ShippingForm.status == ShippingFormStatus.pending
            )
        ) or 0

        # 2. Orders per status
        orders_by_status = {status: 0 for status in READABLE_STATUSES}
        result = await db.execute(
            select(Order.status, func.count(Order.id)).group_by(Order.status)
        )
        for status, count in result.all():
            orders_by_status[status] = count

        stats = DashboardStatsResponse(
            total_orders=total_orders,
            total_cars=total_cars,
            available_cars=available_cars,
            total_shipping_forms=total_shipping_forms,
            pending_shipping_forms=pending_shipping_forms,
            orders_by_status=orders_by_status,
        )

        # 3. Financial overview
        total_income = await db.scalar(
            select(func.sum(FinancialTransaction.amount)).where(
                FinancialTransaction.type == TransactionType.Income
            )
        ) or 0.0
        total_expenses = await db.scalar(
            select(func.sum(FinancialTransaction.amount)).where(
                FinancialTransaction.type == TransactionType.Expense
            )
        ) or 0.0
        outstanding = await db.scalar(
            select(
                func.sum(FinancialTransaction.amount - FinancialTransaction.paid_amount)
            ).where(FinancialTransaction.type == TransactionType.Income)
        ) or 0.0

        financial_overview = DashboardFinancialOverviewResponse(
            total_income=float(total_income),
            total_expenses=float(total_expenses),
            net_balance=float(total_income) - float(total_expenses),
            outstanding=float(outstanding),
        )

        # 4. Recent transactions
        recent = await db.execute(
            select(FinancialTransaction)
            .order_by(FinancialTransaction.created_at.desc(), FinancialTransaction.id.desc())
            .limit(5)
        )
        recent_transactions = [
            DashboardTransactionResponse(
                id=transaction.id,
                type=transaction.type.value,
                category=transaction.category.value,
                amount=transaction.amount,
                currency=transaction.currency.value,
                payment_status=transaction.payment_status.value,
                transaction_date=transaction.transaction_date,
                customer_name=transaction.customer_name,
            )
            for transaction in recent.scalars().all()
        ]

        return DashboardResponse(
            stats=stats,
            financial_overview=financial_overview,
            recent_transactions=recent_transactions,
        )
