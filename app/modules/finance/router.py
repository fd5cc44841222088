"""Finance Router - financial transactions"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.engine import get_db_util
from app.core.response_interceptor import CustomAPIRoute, skip_interceptor
from app.modules.users.auth import TokenData, require_admin, require_any_role
from .models import TransactionType, TransactionCategory, PaymentStatus
from .service import FinanceService
from .schemas import (
    TransactionFormDto,
    TransactionResponse,
    TransactionDetailResponse,
    TransactionListResponse,
    FinancialSummaryResponse,
)

router = APIRouter(prefix="/finance", tags=["finance"], route_class=CustomAPIRoute)


@router.post("/transactions/preview", response_model=FinancialSummaryResponse)
async def preview_transaction(
    form: TransactionFormDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """
    Derived values for the form being filled: total commissions, remaining
    balance, net profit (car categories) and the DZD buying price.
    Nothing is validated or written.
    """
    return await FinanceService.preview(db, form)


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    form: TransactionFormDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """
    Create a transaction.

    With customer name and phone, a completed shipping form is created as well
    unless one already exists for the same VIN.
    """
    return await FinanceService.create(db, form)


@router.get("/transactions", response_model=TransactionListResponse)
async def get_transactions(
    type: Optional[TransactionType] = Query(None),
    category: Optional[TransactionCategory] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None),
    search: Optional[str] = Query(None, description="Description, customer, VIN, brand or model"),
    page: int = Query(1, ge=1),
    page_size: int = Query(25, ge=1, le=100),
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    return await FinanceService.find_all(
        db, type, category, payment_status, search, page, page_size
    )


@router.get("/transactions/{transaction_id}", response_model=TransactionDetailResponse)
async def get_transaction(
    transaction_id: int,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Transaction with its description split back into fields and the derived summary"""
    return await FinanceService.find_detail(db, transaction_id)


@router.put("/transactions/{transaction_id}", response_model=TransactionDetailResponse)
async def update_transaction(
    transaction_id: int,
    form: TransactionFormDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Save the edit form, same validation as create"""
    transaction = await FinanceService.update(db, transaction_id, form)
    return FinanceService.to_detail(transaction)


@router.delete("/transactions/{transaction_id}")
@skip_interceptor
async def delete_transaction(
    transaction_id: int,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_admin),
):
    """Delete a transaction (Admin only)"""
    await FinanceService.remove(db, transaction_id)
    return {"message": "Transaction deleted successfully"}
