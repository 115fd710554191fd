"""Venue quoters for constant-product (V2) and concentrated-liquidity (V3) pools."""

import logging
from typing import List, Optional

from .config import NATIVE_TOKEN_ADDRESS, DexConfig
from .contracts import UNISWAP_V2_FACTORY_ABI, UNISWAP_V2_ROUTER_ABI, UNISWAP_V3_QUOTER_ABI
from .errors import ContractRevertError, RPCError
from .models import CandidateQuote, Quote, QuoteStatus, Route, Venue
from .tokens import same_address

logger = logging.getLogger(__name__)


class ConstantProductVenue:
    """Uniswap V2 style router: multi-hop paths through the wrapped native token."""

    venue = Venue.UNISWAP_V2

    def __init__(self, rpc, config: DexConfig):
        self.rpc = rpc
        self.config = config

    @property
    def router(self) -> str:
        return self.config.v2_router

    async def pair_exists(self, token_a: str, token_b: str) -> bool:
        if same_address(token_a, token_b):
            return False
        pair = await self.rpc.call(
            self.config.v2_factory, UNISWAP_V2_FACTORY_ABI, "getPair", [token_a, token_b]
        )
        return not same_address(pair, NATIVE_TOKEN_ADDRESS)

    async def candidate_paths(self, token_in: str, token_out: str) -> List[Route]:
        """Direct route if the pair exists, plus the route via the base asset.

        An empty list means this venue has nothing to offer, not an error.
        """
        base = self.config.wrapped_native
        paths: List[Route] = []

        if await self.pair_exists(token_in, token_out):
            paths.append((token_in, token_out))

        if (
            not same_address(token_in, base)
            and not same_address(token_out, base)
            and await self.pair_exists(token_in, base)
            and await self.pair_exists(base, token_out)
        ):
            paths.append((token_in, base, token_out))

        return paths

    async def quote_route(self, route: Route, amount_in: int) -> CandidateQuote:
        try:
            amounts = await self.rpc.call(
                self.router, UNISWAP_V2_ROUTER_ABI, "getAmountsOut", [amount_in, list(route)]
            )
        except ContractRevertError:
            return CandidateQuote.no_liquidity()
        except RPCError as e:
            return CandidateQuote.failed(e)

        if not amounts or amounts[-1] == 0:
            return CandidateQuote.no_liquidity()
        return CandidateQuote.found(int(amounts[-1]))

    async def best_quote(self, token_in: str, token_out: str, amount_in: int) -> Optional[Quote]:
        """Best output across candidate paths; the first path wins ties."""
        best: Optional[Quote] = None

        for route in await self.candidate_paths(token_in, token_out):
            candidate = await self.quote_route(route, amount_in)
            if candidate.status == QuoteStatus.FAILED:
                raise candidate.error
            if candidate.status == QuoteStatus.NO_LIQUIDITY:
                logger.debug(f"No V2 liquidity on route {route}")
                continue

            if best is None or candidate.amount_out > best.amount_out:
                best = Quote(
                    venue=self.venue,
                    router=self.router,
                    token_in=token_in,
                    token_out=token_out,
                    amount_in=amount_in,
                    amount_out=candidate.amount_out,
                    route=route,
                )

        return best

    async def requote(self, quote: Quote, amount_in: int) -> CandidateQuote:
        return await self.quote_route(quote.route, amount_in)


class ConcentratedLiquidityVenue:
    """Uniswap V3 style quoter: direct pair across the configured fee tiers."""

    venue = Venue.UNISWAP_V3

    def __init__(self, rpc, config: DexConfig):
        self.rpc = rpc
        self.config = config

    @property
    def router(self) -> str:
        return self.config.v3_router

    async def quote_fee_tier(self, token_in: str, token_out: str, fee: int, amount_in: int) -> CandidateQuote:
        try:
            amount_out = await self.rpc.call(
                self.config.v3_quoter,
                UNISWAP_V3_QUOTER_ABI,
                "quoteExactInputSingle",
                [token_in, token_out, fee, amount_in, 0],
            )
        except ContractRevertError:
            return CandidateQuote.no_liquidity()
        except RPCError as e:
            return CandidateQuote.failed(e)

        if not amount_out:
            return CandidateQuote.no_liquidity()
        return CandidateQuote.found(int(amount_out))

    async def best_quote(self, token_in: str, token_out: str, amount_in: int) -> Optional[Quote]:
        """Best output across fee tiers; failed or empty tiers are skipped."""
        best: Optional[Quote] = None

        for fee in self.config.fee_tiers:
            candidate = await self.quote_fee_tier(token_in, token_out, fee, amount_in)
            if candidate.status != QuoteStatus.FOUND:
                logger.debug(f"Skipping V3 fee tier {fee}: {candidate.status.value} {candidate.error or ''}")
                continue

            if best is None or candidate.amount_out > best.amount_out:
                best = Quote(
                    venue=self.venue,
                    router=self.router,
                    token_in=token_in,
                    token_out=token_out,
                    amount_in=amount_in,
                    amount_out=candidate.amount_out,
                    route=(token_in, token_out),
                    fee=fee,
                )

        return best

    async def requote(self, quote: Quote, amount_in: int) -> CandidateQuote:
        return await self.quote_fee_tier(quote.token_in, quote.token_out, quote.fee, amount_in)
