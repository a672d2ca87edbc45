from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


class RateSource(str, Enum):
    LIVE = "live"
    FALLBACK = "fallback"


class ExchangeRate(SQLModel):
    """One pair rate as returned by the provider."""
    base_code: str
    target_code: str
    conversion_rate: float = Field(..., gt=0)
    fetched_at: datetime


class ConversionRateSnapshot(SQLModel):
    rate: float
    base_code: str
    target_code: str
    last_updated: Optional[datetime] = None
    source: RateSource
    is_stale: bool


class ConversionRateRead(SQLModel):
    """Body of GET /quotations/convrate."""
    result: str = "success"
    base_code: str
    target_code: str
    conversion_rate: float
    amount: float
    conversion_result: float
    last_updated: Optional[datetime] = None
    source: RateSource
    is_stale: bool
