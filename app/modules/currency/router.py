"""Currency Router - converter rates and conversion"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db.engine import get_db_util
from app.core.response_interceptor import CustomAPIRoute
from app.core.utils import parse_number
from app.modules.settings.service import SettingsService
from app.modules.users.auth import TokenData, require_any_role
from .conversion import ConverterRates, convert, format_conversion
from .schemas import (
    ConverterRatesDto,
    ConverterRatesResponse,
    ConvertRequest,
    ConvertResponse,
)

router = APIRouter(prefix="/currency", tags=["currency"], route_class=CustomAPIRoute)


@router.get("/rates", response_model=ConverterRatesResponse)
async def get_converter_rates(
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """Converter rates, defaults until saved"""
    return await SettingsService.get_converter_rates(db)


@router.put("/rates", response_model=ConverterRatesResponse)
async def save_converter_rates(
    rates_dto: ConverterRatesDto,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    return await SettingsService.save_converter_rates(
        db, rates_dto.usdt_to_dzd, rates_dto.krw_to_usdt
    )


@router.post("/convert", response_model=ConvertResponse)
async def convert_amount(
    request: ConvertRequest,
    db: AsyncSession = Depends(get_db_util),
    current_user: TokenData = Depends(require_any_role),
):
    """
    Convert an amount with the saved rates.

    An unparseable amount is not an error: result is null and display is "---".
    """
    rates = ConverterRates(**await SettingsService.get_converter_rates(db))
    result = convert(request.amount, request.mode, rates)
    return ConvertResponse(
        mode=request.mode,
        amount=parse_number(request.amount),
        result=result,
        display=format_conversion(result, request.mode),
        rates=ConverterRatesResponse(
            usdt_to_dzd=rates.usdt_to_dzd, krw_to_usdt=rates.krw_to_usdt
        ),
    )
