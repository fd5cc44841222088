"""Currency converter DTOs"""

from typing import Optional, Union
from pydantic import BaseModel, Field

from .conversion import ConversionMode


class ConverterRatesDto(BaseModel):
    usdt_to_dzd: float = Field(..., gt=0, description="DZD for one USDT")
    krw_to_usdt: float = Field(..., gt=0, description="USDT for one KRW")


class ConverterRatesResponse(BaseModel):
    usdt_to_dzd: float
    krw_to_usdt: float


class ConvertRequest(BaseModel):
    # Raw input text is accepted, unparseable values give an unavailable result
    amount: Union[float, str, None] = None
    mode: ConversionMode = ConversionMode.USDT_DZD


class ConvertResponse(BaseModel):
    mode: ConversionMode
    amount: Optional[float] = None
    result: Optional[float] = None
    display: str
    rates: ConverterRatesResponse
