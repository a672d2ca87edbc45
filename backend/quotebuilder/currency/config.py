"""Exchange-rate settings (CURRENCY_ prefix in the environment)."""
from typing import Optional

from pydantic_settings import BaseSettings


class CurrencySettings(BaseSettings):
    API_BASE_URL: str = "https://v6.exchangerate-api.com/v6"
    API_KEY: Optional[str] = None
    BASE_CODE: str = "USD"
    TARGET_CODE: str = "INR"
    # Served until the first successful fetch
    FALLBACK_RATE: float = 83.0
    REFRESH_HOUR_UTC: int = 0
    MAX_AGE_HOURS: float = 36.0
    REQUEST_TIMEOUT: float = 10.0
    REFRESH_ENABLED: bool = True

    class Config:
        env_prefix = "CURRENCY_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


currency_settings = CurrencySettings()
