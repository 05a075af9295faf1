"""
Centralized application configuration.

This module loads every environment variable the engine needs using
Pydantic Settings for automatic validation.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application configuration using Pydantic Settings.

    All settings are read from environment variables with defaults
    suitable for development.
    """

    # === BASIC APP CONFIGURATION ===
    APP_NAME: str = "Orderdesk Order Entry"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="development", env="ENV")
    DEBUG: bool = Field(default=True, env="DEBUG")

    # === ORDER STORE SERVICE ===
    ORDER_STORE_URL: str = Field(default="http://localhost:3000/api", env="ORDER_STORE_URL")
    ORDER_STORE_API_KEY: Optional[str] = Field(default=None, env="ORDER_STORE_API_KEY")
    ORDER_STORE_TIMEOUT: int = Field(default=30, env="ORDER_STORE_TIMEOUT")
    ORDER_STORE_MAX_RETRIES: int = Field(default=3, env="ORDER_STORE_MAX_RETRIES")

    # === PRICING ===
    # VAT is included in the grand total and extracted at this rate
    VAT_RATE: Decimal = Field(default=Decimal("0.07"), env="VAT_RATE")
    CURRENCY: str = Field(default="THB", env="CURRENCY")
    DEFAULT_ADDRESS_NAME: str = Field(default="Unspecified", env="DEFAULT_ADDRESS_NAME")

    # === LOGGING ===
    LOG_LEVEL: str = Field(default="INFO", env="LOG_LEVEL")
    LOG_FILE_PATH: Optional[str] = Field(default=None, env="LOG_FILE_PATH")
    LOG_MAX_SIZE_MB: int = Field(default=10, env="LOG_MAX_SIZE_MB")
    LOG_BACKUP_COUNT: int = Field(default=5, env="LOG_BACKUP_COUNT")
    LOG_FORMAT: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s", env="LOG_FORMAT")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "allow",
    }

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate the log level name."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of: {valid_levels}")
        return v.upper()

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate the environment name."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"ENVIRONMENT must be one of: {valid_envs}")
        return v.lower()

    @field_validator("VAT_RATE")
    @classmethod
    def validate_vat_rate(cls, v):
        """VAT rate is a fraction, e.g. 0.07 for 7%."""
        if not Decimal("0") <= v < Decimal("1"):
            raise ValueError("VAT_RATE must be between 0 and 1")
        return v

    @field_validator("CURRENCY")
    @classmethod
    def validate_currency(cls, v):
        """Currency must be an ISO 4217 code."""
        if not v or len(v) != 3:
            raise ValueError(f"Invalid currency code: {v}")
        return v.upper()

    @field_validator("ORDER_STORE_URL")
    @classmethod
    def validate_order_store_url(cls, v):
        """Strip the trailing slash so endpoint paths can be appended."""
        if not v.startswith(("http://", "https://")):
            v = f"https://{v}"
        return v.rstrip("/")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    def get_order_store_headers(self) -> dict:
        """
        Build headers for requests to the order store.

        Returns:
            dict: Request headers
        """
        headers = {
            "Content-Type": "application/json",
            "User-Agent": f"{self.APP_NAME}/{self.APP_VERSION}",
        }
        if self.ORDER_STORE_API_KEY:
            headers["Authorization"] = f"Bearer {self.ORDER_STORE_API_KEY}"
        return headers


@lru_cache()
def get_settings() -> Settings:
    """
    Return the singleton configuration instance.

    Uses an LRU cache to avoid rebuilding the configuration
    several times during execution.

    Returns:
        Settings: Configuration instance
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Reload the configuration (useful for testing).

    Returns:
        Settings: New configuration instance
    """
    get_settings.cache_clear()
    return get_settings()
