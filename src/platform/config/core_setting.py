import json
from pathlib import Path
from typing import Annotated, List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Mailer Booking'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS, comma separated or a JSON list
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and v.strip().startswith('['):
            return json.loads(v)
        if isinstance(v, str):
            return [i.strip() for i in v.split(',') if i.strip()]
        if isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'mailer_booking'
    POSTGRES_PORT: int = 5432

    # Full URL override, e.g. sqlite+aiosqlite:///./mailer.db for local runs
    DATABASE_URL: str | None = None

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # Pricing (all money in cents)
    DEFAULT_FIRST_SLOT_PRICE: int = 60000
    DEFAULT_ADDITIONAL_SLOT_PRICE: int = 50000
    MAX_SLOTS_PER_BOOKING: int = 4

    # Loyalty programme
    LOYALTY_DISCOUNT_AMOUNT: int = 15000
    LOYALTY_SLOT_THRESHOLD: int = 3

    # Industry exempt from the one-paid-booking-per-slot rule
    UNLIMITED_INDUSTRY_NAME: str = 'Other'

    # Refunds
    REFUND_CUTOFF_DAYS: int = 7
    REFUND_PROCESSING_FEE_PERCENT: int = 3

    # Expiration reaper
    ENABLE_EXPIRATION_REAPER: bool = True
    BOOKING_PENDING_TIMEOUT_MINUTES: int = 15
    REAPER_INTERVAL_SECONDS: float = 60.0
    REAPER_BOOKING_TIMEOUT_SECONDS: float = 10.0

    # Admin notification windows
    NEW_BOOKING_NOTIFICATION_HOURS: int = 24
    CANCELLED_BOOKING_NOTIFICATION_DAYS: int = 7

    # Uploaded artwork / logo / image files
    UPLOAD_DIR: str = str(_PROJECT_ROOT / 'uploads')

    # Tracing, spans are only exported when an endpoint is set
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None
    OTEL_CONSOLE_EXPORT: bool = False


settings = Settings()  # type: ignore
