"""
HTTP client for the exchangerate-api "pair" endpoint.

    GET {base_url}/{api_key}/pair/{base}/{target}
    -> {"result": "success", "base_code": "USD", "target_code": "INR",
        "conversion_rate": 83.12, ...}
"""
import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from quotebuilder.currency.exceptions import ExchangeRateFetchException
from quotebuilder.currency.models import ExchangeRate

logger = logging.getLogger(__name__)


class ExchangeRateClient:
    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        base_code: str = "USD",
        target_code: str = "INR",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.base_code = base_code
        self.target_code = target_code
        self.timeout = timeout
        self.transport = transport

    @property
    def pair_url(self) -> str:
        return f"{self.base_url}/{self.api_key}/pair/{self.base_code}/{self.target_code}"

    async def fetch_rate(self) -> ExchangeRate:
        """Fetches the current base -> target rate.

        Raises:
            ExchangeRateFetchException: no API key, transport error, non-2xx
                answer, or a payload that is not a successful pair result.
        """
        if not self.api_key:
            raise ExchangeRateFetchException("no API key configured")

        logger.debug(f"[ExchangeRateClient] Fetching {self.base_code}->{self.target_code}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(self.pair_url)
                resp.raise_for_status()
                data = resp.json()
        except httpx.InvalidURL as e:
            raise ExchangeRateFetchException(f"invalid request URL: {e}") from e
        except httpx.HTTPError as e:
            raise ExchangeRateFetchException(f"request failed: {e}") from e
        except ValueError as e:
            raise ExchangeRateFetchException("response is not JSON") from e

        return self._parse(data)

    def _parse(self, data: dict) -> ExchangeRate:
        if not isinstance(data, dict) or data.get("result") != "success":
            error_type = data.get("error-type") if isinstance(data, dict) else None
            raise ExchangeRateFetchException(f"provider returned an error ({error_type or 'unknown'})")

        rate = data.get("conversion_rate")
        if not isinstance(rate, (int, float)) or isinstance(rate, bool) or rate <= 0:
            raise ExchangeRateFetchException(f"invalid conversion_rate: {rate!r}")

        return ExchangeRate(
            base_code=data.get("base_code", self.base_code),
            target_code=data.get("target_code", self.target_code),
            conversion_rate=float(rate),
            fetched_at=datetime.now(timezone.utc),
        )
