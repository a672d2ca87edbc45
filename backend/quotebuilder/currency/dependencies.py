"""
Dependencies of the currency module.

The cache is shared by the whole process: the refresh loop started in the
application lifespan writes to it and /convrate reads from it.
"""
from datetime import timedelta
from typing import Annotated, Optional

from fastapi import Depends

from quotebuilder.currency.cache import ConversionRateCache
from quotebuilder.currency.client import ExchangeRateClient
from quotebuilder.currency.config import CurrencySettings, currency_settings

_conversion_cache: Optional[ConversionRateCache] = None


def build_conversion_cache(settings: CurrencySettings) -> ConversionRateCache:
    client = ExchangeRateClient(
        base_url=settings.API_BASE_URL,
        api_key=settings.API_KEY,
        base_code=settings.BASE_CODE,
        target_code=settings.TARGET_CODE,
        timeout=settings.REQUEST_TIMEOUT,
    )
    return ConversionRateCache(
        fetcher=client.fetch_rate,
        fallback_rate=settings.FALLBACK_RATE,
        base_code=settings.BASE_CODE,
        target_code=settings.TARGET_CODE,
        max_age=timedelta(hours=settings.MAX_AGE_HOURS),
    )


def get_conversion_cache() -> ConversionRateCache:
    global _conversion_cache
    if _conversion_cache is None:
        _conversion_cache = build_conversion_cache(currency_settings)
    return _conversion_cache

ConversionCacheDep = Annotated[ConversionRateCache, Depends(get_conversion_cache)]
