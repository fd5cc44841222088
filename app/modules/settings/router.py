"""Settings Router - API endpoints for dealership configuration"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.engine import get_db_util
from app.core.response_interceptor import CustomAPIRoute
from app.modules.users.auth import TokenData, require_admin, require_any_role
from .service import SettingsService
from .schemas import (
    SettingResponse,
    UpdateSettingDto,
    TransactionRatesResponse,
    UpdateTransactionRatesDto,
)

router = APIRouter(prefix="/settings", tags=["settings"], route_class=CustomAPIRoute)


@router.get("/exchange-rates", response_model=TransactionRatesResponse)
async def get_exchange_rates(
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """
    Exchange rates read when the transaction form loads.

    - exchange_rate_dzd_usdt: DZD for one USDT
    - exchange_rate_usdt_krw: KRW for one USDT
    """
    return await SettingsService.get_transaction_rates(db)


@router.put("/exchange-rates", response_model=TransactionRatesResponse)
async def update_exchange_rates(
    update_dto: UpdateTransactionRatesDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_admin),
):
    """Save the transaction-form exchange rates (Admin only)"""
    return await SettingsService.save_transaction_rates(db, update_dto)


@router.get("", response_model=List[SettingResponse])
async def get_all_settings(
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_admin),
):
    """List every stored setting (Admin only)"""
    return await SettingsService.find_all(db)


@router.get("/{key}", response_model=SettingResponse)
async def get_setting(
    key: str,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    return await SettingsService.find_one(db, key)


@router.put("/{key}", response_model=SettingResponse)
async def update_setting(
    key: str,
    update_dto: UpdateSettingDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_admin),
):
    """Create or replace a single setting (Admin only)"""
    settings = await SettingsService.set_values(db, {key: update_dto.value})
    return settings[0]
