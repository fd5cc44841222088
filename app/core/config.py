from pydantic_settings import BaseSettings
from pydantic import Field
import os
from pathlib import Path


class Config(BaseSettings):
    # Database (SQLite via aiosqlite by default, PostgreSQL URLs also work)
    database_url: str = Field(
        default=f"sqlite+aiosqlite:///{Path(__file__).parent.parent.parent / 'data' / 'dealership.db'}",
        alias="DB_URL",
    )

    # JWT Configuration
    secret_key: str = Field(default="change-me", alias="JWT_SECRET")
    algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 12, alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    # AWS Configuration (blob storage for car media, shipping PDFs, documents)
    aws_region: str = Field(default="eu-west-3", alias="MY_AWS_REGION")
    aws_access_key_id: str = Field(default="", alias="MY_AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str = Field(default="", alias="MY_AWS_SECRET_ACCESS_KEY")
    s3_bucket_name: str = Field(default="dealership-media", alias="S3_BUCKET_NAME")

    # Outbound WhatsApp hand-off
    whatsapp_country_code: str = Field(default="213", alias="WHATSAPP_COUNTRY_CODE")
    company_name: str = Field(default="Oussama Auto", alias="COMPANY_NAME")

    # Currency converter defaults, used until rates are saved in settings
    default_usdt_to_dzd: float = Field(default=200.0, alias="DEFAULT_USDT_TO_DZD")
    default_krw_to_usdt: float = Field(default=0.00075, alias="DEFAULT_KRW_TO_USDT")

    is_production: bool = (
        os.getenv("ENVIRONMENT", "development").lower() == "production"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Instantiate the settings
config = Config()
