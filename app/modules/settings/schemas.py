"""Settings DTOs (Data Transfer Objects)"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class SettingResponse(BaseModel):
    key: str
    value: str
    updated_at: datetime

    class Config:
        from_attributes = True


class UpdateSettingDto(BaseModel):
    value: str = Field(..., max_length=1000)


class TransactionRatesResponse(BaseModel):
    """Rates pre-filled into the transaction form; None when never saved"""

    exchange_rate_dzd_usdt: Optional[float] = None
    exchange_rate_usdt_krw: Optional[float] = None


class UpdateTransactionRatesDto(BaseModel):
    exchange_rate_dzd_usdt: Optional[float] = Field(None, gt=0)
    exchange_rate_usdt_krw: Optional[float] = Field(None, gt=0)
