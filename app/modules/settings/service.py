"""Settings Service - explicit load/save of key/value configuration"""

from typing import Dict, Iterable, List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import config
from app.core.exceptions import NotFoundError
from app.core.utils import parse_number
from .models import (
    Setting,
    EXCHANGE_RATE_DZD_USDT,
    EXCHANGE_RATE_USDT_KRW,
    CONVERTER_USDT_TO_DZD,
    CONVERTER_KRW_TO_USDT,
)
from .schemas import TransactionRatesResponse, UpdateTransactionRatesDto


class SettingsService:
    """Service for reading and writing settings rows"""

    @staticmethod
    async def get_values(db: AsyncSession, keys: Iterable[str]) -> Dict[str, str]:
        """
        Load the given keys in a single query.

        Returns:
            Dict of key -> value for the keys that exist
        """
        result = await db.execute(select(Setting).where(Setting.key.in_(list(keys))))
        return {setting.key: setting.value for setting in result.scalars().all()}

    @staticmethod
    async def set_values(db: AsyncSession, values: Dict[str, str]) -> List[Setting]:
        """Insert or update each key, returning the stored rows."""
        existing = await db.execute(select(Setting).where(Setting.key.in_(list(values))))
        by_key = {setting.key: setting for setting in existing.scalars().all()}

        for key, value in values.items():
            if key in by_key:
                by_key[key].value = value
            else:
                by_key[key] = Setting(key=key, value=value)
                db.add(by_key[key])

        await db.flush()
        for setting in by_key.values():
            await db.refresh(setting)
        return [by_key[key] for key in values]

    @staticmethod
    async def find_all(db: AsyncSession) -> List[Setting]:
        result = await db.execute(select(Setting).order_by(Setting.key))
        return list(result.scalars().all())

    @staticmethod
    async def find_one(db: AsyncSession, key: str) -> Setting:
        """
        Raises:
            NotFoundError: If the key was never saved
        """
        setting = await db.scalar(select(Setting).where(Setting.key == key))
        if not setting:
            raise NotFoundError("Setting", key)
        return setting

    @staticmethod
    async def get_transaction_rates(db: AsyncSession) -> TransactionRatesResponse:
        """Exchange rates the transaction form is pre-filled with."""
        values = await SettingsService.get_values(
            db, [EXCHANGE_RATE_DZD_USDT, EXCHANGE_RATE_USDT_KRW]
        )
        return TransactionRatesResponse(
            exchange_rate_dzd_usdt=parse_number(values.get(EXCHANGE_RATE_DZD_USDT)),
            exchange_rate_usdt_krw=parse_number(values.get(EXCHANGE_RATE_USDT_KRW)),
        )

    @staticmethod
    async def save_transaction_rates(
        db: AsyncSession, update_dto: UpdateTransactionRatesDto
    ) -> TransactionRatesResponse:
        values = {
            key: str(value)
            for key, value in (
                (EXCHANGE_RATE_DZD_USDT, update_dto.exchange_rate_dzd_usdt),
                (EXCHANGE_RATE_USDT_KRW, update_dto.exchange_rate_usdt_krw),
            )
            if value is not None
        }
        if values:
            await SettingsService.set_values(db, values)
        return await SettingsService.get_transaction_rates(db)

    @staticmethod
    async def get_converter_rates(db: AsyncSession) -> Dict[str, float]:
        """
        Converter rates, falling back to the configured defaults for keys that
        were never saved or hold something unparseable.
        """
        values = await SettingsService.get_values(
            db, [CONVERTER_USDT_TO_DZD, CONVERTER_KRW_TO_USDT]
        )
        usdt_to_dzd: Optional[float] = parse_number(values.get(CONVERTER_USDT_TO_DZD))
        krw_to_usdt: Optional[float] = parse_number(values.get(CONVERTER_KRW_TO_USDT))
        return {
            "usdt_to_dzd": usdt_to_dzd if usdt_to_dzd is not None else config.default_usdt_to_dzd,
            "krw_to_usdt": krw_to_usdt if krw_to_usdt is not None else config.default_krw_to_usdt,
        }

    @staticmethod
    async def save_converter_rates(
        db: AsyncSession, usdt_to_dzd: float, krw_to_usdt: float
    ) -> Dict[str, float]:
        await SettingsService.set_values(
            db,
            {
                CONVERTER_USDT_TO_DZD: str(usdt_to_dzd),
                CONVERTER_KRW_TO_USDT: str(krw_to_usdt),
            },
        )
        return await SettingsService.get_converter_rates(db)
