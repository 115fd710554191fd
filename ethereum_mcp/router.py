"""Best-quote selection across venues."""

import dataclasses
import logging
from typing import List, Optional

from .config import DexConfig
from .errors import InputError, NoRouteError
from .impact import PriceImpactEstimator
from .models import Quote
from .tokens import same_address
from .venues import ConcentratedLiquidityVenue, ConstantProductVenue

logger = logging.getLogger(__name__)


class QuoteEngine:
    """Runs every venue and keeps the quote with the largest output.

    Venues are evaluated in order (concentrated liquidity first). On an exact
    tie the later venue wins, so a V2 quote is preferred over an equal V3
    quote.
    """

    def __init__(self, venues: List, estimator: PriceImpactEstimator):
        self.venues = venues
        self.estimator = estimator

    @classmethod
    def for_config(cls, rpc, config: DexConfig) -> "QuoteEngine":
        return cls(
            venues=[ConcentratedLiquidityVenue(rpc, config), ConstantProductVenue(rpc, config)],
            estimator=PriceImpactEstimator(config.impact_reference_bps),
        )

    async def quote_best_swap(
        self,
        token_in: str,
        token_in_decimals: int,
        token_out: str,
        token_out_decimals: int,
        amount_in: int,
    ) -> Quote:
        if same_address(token_in, token_out):
            raise InputError("Input and output tokens are the same, nothing to swap")
        if amount_in <= 0:
            raise InputError("Swap amount must be greater than 0")

        best: Optional[Quote] = None
        best_venue = None
        for venue in self.venues:
            quote = await venue.best_quote(token_in, token_out, amount_in)
            if quote is None:
                logger.debug(f"{venue.venue.value} has no quote for {token_in} -> {token_out}")
                continue
            if best is None or quote.amount_out >= best.amount_out:
                best, best_venue = quote, venue

        if best is None:
            raise NoRouteError(f"No quote found on Uniswap V2/V3 for {token_in} -> {token_out}")

        impact = await self.estimator.estimate(best_venue, best, token_in_decimals, token_out_decimals)
        logger.info(
            f"Best quote {best.venue.value} {best.amount_in} -> {best.amount_out} "
            f"via {len(best.route) - 1} hop(s), impact {impact:.4f}%"
        )
        return dataclasses.replace(best, price_impact_pct=impact)
