"""Price impact estimation against a small reference trade."""

import logging
from decimal import Decimal

from .config import DEFAULT_IMPACT_REFERENCE_BPS
from .models import Quote, QuoteStatus
from .units import units_to_decimal

logger = logging.getLogger(__name__)


class PriceImpactEstimator:
    """Compares the executed price of a quote with the price of a small trade.

    Estimation is best-effort: any failure reports an impact of zero.
    """

    def __init__(self, reference_bps: int = DEFAULT_IMPACT_REFERENCE_BPS):
        self.reference_bps = reference_bps

    def reference_amount(self, amount_in: int) -> int:
        """Reference input: a fraction of the actual input, at least one unit."""
        return max(amount_in * self.reference_bps // 10_000, 1)

    async def estimate(self, venue, quote: Quote, in_decimals: int, out_decimals: int) -> Decimal:
        reference_in = self.reference_amount(quote.amount_in)
        if reference_in == quote.amount_in:
            return Decimal(0)

        reference = await venue.requote(quote, reference_in)
        if reference.status != QuoteStatus.FOUND or reference.amount_out == 0:
            logger.debug(f"Reference quote unavailable for {quote.route}: {reference.status.value}")
            return Decimal(0)

        spot_price = units_to_decimal(reference.amount_out, out_decimals) / units_to_decimal(
            reference_in, in_decimals
        )
        if spot_price == 0:
            return Decimal(0)

        executed_price = units_to_decimal(quote.amount_out, out_decimals) / units_to_decimal(
            quote.amount_in, in_decimals
        )
        return abs(spot_price - executed_price) / spot_price * 100
