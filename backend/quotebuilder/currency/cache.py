"""
In-process cache of the conversion rate and its daily refresh schedule.

Readers never wait on the provider: they get the last good rate, or the
configured fallback rate until a fetch has succeeded once.
"""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional

from quotebuilder.currency.exceptions import ExchangeRateFetchException
from quotebuilder.currency.models import ConversionRateSnapshot, ExchangeRate, RateSource

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[ExchangeRate]]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ConversionRateCache:
    def __init__(
        self,
        fetcher: Fetcher,
        clock: Clock = utc_now,
        fallback_rate: float = 83.0,
        base_code: str = "USD",
        target_code: str = "INR",
        max_age: timedelta = timedelta(hours=36),
    ) -> None:
        self._fetcher = fetcher
        self._clock = clock
        self._fallback_rate = fallback_rate
        self._base_code = base_code
        self._target_code = target_code
        self._max_age = max_age
        self._current: Optional[ExchangeRate] = None
        self._lock = asyncio.Lock()

    def snapshot(self) -> ConversionRateSnapshot:
        """Current rate with its metadata. Fallback values are always stale."""
        current = self._current
        if current is None:
            return ConversionRateSnapshot(
                rate=self._fallback_rate,
                base_code=self._base_code,
                target_code=self._target_code,
                last_updated=None,
                source=RateSource.FALLBACK,
                is_stale=True,
            )
        return ConversionRateSnapshot(
            rate=current.conversion_rate,
            base_code=current.base_code,
            target_code=current.target_code,
            last_updated=current.fetched_at,
            source=RateSource.LIVE,
            is_stale=self._clock() - current.fetched_at > self._max_age,
        )

    async def refresh(self) -> bool:
        """Fetches a new rate. Returns False, keeping the previous value, on failure."""
        async with self._lock:
            try:
                rate = await self._fetcher()
            except ExchangeRateFetchException as e:
                logger.warning(f"[ConversionRateCache] Refresh failed, keeping previous rate: {e.message}")
                return False
            except Exception as e:
                logger.error(f"[ConversionRateCache] Unexpected refresh error, keeping previous rate: {e}", exc_info=True)
                return False
            self._current = rate
            logger.info(
                f"[ConversionRateCache] Rate updated: 1 {rate.base_code} = {rate.conversion_rate} {rate.target_code}"
            )
            return True


def seconds_until_next_refresh(now: datetime, hour: int) -> float:
    """Seconds from `now` until the next `hour`:00 UTC, always > 0."""
    now = now.astimezone(timezone.utc)
    target = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


async def run_refresh_loop(
    cache: ConversionRateCache,
    hour: int = 0,
    clock: Clock = utc_now,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    refresh_on_start: bool = True,
) -> None:
    """Refreshes `cache` once now, then every day at `hour` UTC until cancelled."""
    if refresh_on_start:
        await cache.refresh()
    while True:
        delay = seconds_until_next_refresh(clock(), hour)
        logger.debug(f"[ConversionRateCache] Next refresh in {delay:.0f}s")
        await sleep(delay)
        await cache.refresh()
