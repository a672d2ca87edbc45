import logging

from fastapi import APIRouter, Depends, Query

from quotebuilder.auth.dependencies import require_token
from quotebuilder.currency.dependencies import ConversionCacheDep
from quotebuilder.currency.models import ConversionRateRead

logger = logging.getLogger(__name__)

# Shares the /quotations prefix; included before the quotations router so
# that /convrate is not captured by /{quotation_id}.
router = APIRouter(
    prefix="/quotations",
    tags=["Currency"],
    dependencies=[Depends(require_token)],
)


@router.get("/convrate", response_model=ConversionRateRead)
async def get_conversion_rate(
    cache: ConversionCacheDep,
    amount: float = Query(1.0, ge=0, description="Amount in the base currency to convert"),
):
    """Current conversion rate with its freshness metadata."""
    snapshot = cache.snapshot()
    logger.info(
        f"API get_conversion_rate {snapshot.base_code}->{snapshot.target_code} "
        f"source={snapshot.source.value} stale={snapshot.is_stale}"
    )
    return ConversionRateRead(
        base_code=snapshot.base_code,
        target_code=snapshot.target_code,
        conversion_rate=snapshot.rate,
        amount=amount,
        conversion_result=amount * snapshot.rate,
        last_updated=snapshot.last_updated,
        source=snapshot.source,
        is_stale=snapshot.is_stale,
    )
