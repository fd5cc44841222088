"""Key/value settings model"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.db.base import BaseModel


# Rates used by the transaction form (DZD per USDT, KRW per USDT)
EXCHANGE_RATE_DZD_USDT = "exchange_rate_dzd_usdt"
EXCHANGE_RATE_USDT_KRW = "exchange_rate_usdt_krw"

# Rates used by the currency converter (DZD per USDT, USDT per KRW)
CONVERTER_USDT_TO_DZD = "converter_usdt_to_dzd"
CONVERTER_KRW_TO_USDT = "converter_krw_to_usdt"


class Setting(BaseModel):
    """
    One configuration value, addressed by key.
    Values are stored as text and parsed by the service that reads them.
    """

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)

    value: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<Setting(key='{self.key}', value='{self.value}')>"
