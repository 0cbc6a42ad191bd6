import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, SecretStr, field_validator
from typing import Optional, List
from decimal import Decimal


class Settings(BaseSettings):
    # Application Settings
    APP_NAME: str = "PTA Membership Tracker"
    VERSION: str = "1.0.0"
    DEBUG: bool = Field(default=False)
    PRODUCTION: bool = Field(default=False)

    # Database Settings
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./pta.db")
    DB_ECHO: bool = Field(default=False)
    DB_POOL_SIZE: int = Field(default=20)
    DB_MAX_OVERFLOW: int = Field(default=10)
    DB_POOL_TIMEOUT: int = Field(default=30)
    DB_POOL_RECYCLE: int = Field(default=1800)

    # Auth provider settings (tokens are issued elsewhere, we only verify them)
    AUTH_JWT_SECRET: SecretStr = Field(default=SecretStr("change-me"))
    AUTH_JWT_ALGORITHM: str = Field(default="HS256")
    AUTH_JWT_AUDIENCE: Optional[str] = Field(default=None)

    # CORS Settings, comma separated
    ALLOWED_ORIGINS: str = Field(default="http://localhost:3000")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: Optional[str] = Field(default=None)
    LOG_JSON: bool = Field(default=False)

    # Payments
    DEFAULT_MEMBERSHIP_AMOUNT: Decimal = Field(default=Decimal("250"))

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return v

    @field_validator("DEFAULT_MEMBERSHIP_AMOUNT")
    @classmethod
    def positive_amount(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("DEFAULT_MEMBERSHIP_AMOUNT must be positive")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True
    )

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


settings = Settings()


def get_database_url() -> str:
    return settings.DATABASE_URL


def get_log_dir() -> Optional[str]:
    if not settings.LOG_DIR:
        return None
    folder = os.path.abspath(settings.LOG_DIR)
    os.makedirs(folder, exist_ok=True)
    return folder
