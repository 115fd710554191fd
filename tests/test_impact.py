"""Tests for price impact estimation."""

import asyncio
from decimal import Decimal

import pytest

from ethereum_mcp.errors import RPCError
from ethereum_mcp.impact import PriceImpactEstimator
from ethereum_mcp.models import Quote, Venue
from ethereum_mcp.venues import ConcentratedLiquidityVenue, ConstantProductVenue
from tests.conftest import DAI, USDC, WETH


def v2_quote(amount_in: int, amount_out: int, route=(USDC, DAI)) -> Quote:
    return Quote(
        venue=Venue.UNISWAP_V2,
        router="router",
        token_in=route[0],
        token_out=route[-1],
        amount_in=amount_in,
        amount_out=amount_out,
        route=tuple(route),
    )


class TestReferenceAmount:
    @pytest.mark.parametrize(
        "amount_in,expected",
        [(1, 1), (99, 1), (100, 1), (250, 2), (10**6, 10**4)],
    )
    def test_one_percent_with_floor(self, amount_in, expected):
        assert PriceImpactEstimator().reference_amount(amount_in) == expected

    def test_configurable_fraction(self):
        assert PriceImpactEstimator(reference_bps=1000).reference_amount(10**6) == 10**5


class TestEstimate:
    def test_zero_when_reference_equals_input(self, rpc, config):
        venue = ConstantProductVenue(rpc, config)

        impact = asyncio.run(PriceImpactEstimator().estimate(venue, v2_quote(1, 1), 6, 18))

        assert impact == Decimal(0)
        assert rpc.calls_to("getAmountsOut") == []

    def test_zero_when_reference_quote_is_zero(self, rpc, config):
        rpc.set_v2_route((USDC, DAI), lambda amount: 0 if amount < 10**5 else amount * 10**12)
        venue = ConstantProductVenue(rpc, config)

        impact = asyncio.run(PriceImpactEstimator().estimate(venue, v2_quote(10**6, 10**18), 6, 18))

        assert impact == Decimal(0)
        assert rpc.calls_to("getAmountsOut") == [(10**4, [USDC, DAI])]

    def test_zero_when_reference_quote_fails(self, rpc, config):
        rpc.set_v2_route((USDC, DAI), RPCError("getAmountsOut failed: timeout"))
        venue = ConstantProductVenue(rpc, config)

        impact = asyncio.run(PriceImpactEstimator().estimate(venue, v2_quote(10**6, 10**18), 6, 18))

        assert impact == Decimal(0)

    def test_zero_when_reference_quote_reverts(self, rpc, config):
        venue = ConstantProductVenue(rpc, config)

        impact = asyncio.run(PriceImpactEstimator().estimate(venue, v2_quote(10**6, 10**18), 6, 18))

        assert impact == Decimal(0)

    def test_compares_spot_and_executed_price(self, rpc, config):
        # reference: 10_000 units (0.01 USDC) -> 0.01 DAI, spot price 1
        rpc.set_v2_route((USDC, DAI), (10**12, 1))
        venue = ConstantProductVenue(rpc, config)
        # executed: 1 USDC -> 0.95 DAI
        quote = v2_quote(10**6, 95 * 10**16)

        impact = asyncio.run(PriceImpactEstimator().estimate(venue, quote, 6, 18))

        assert impact == Decimal(5)

    def test_requotes_same_route(self, rpc, config):
        route = (USDC, WETH, DAI)
        rpc.set_v2_route(route, (10**12, 1))
        venue = ConstantProductVenue(rpc, config)

        asyncio.run(PriceImpactEstimator().estimate(venue, v2_quote(10**6, 10**18, route), 6, 18))

        assert rpc.calls_to("getAmountsOut") == [(10**4, list(route))]

    def test_requotes_same_fee_tier(self, rpc, config):
        rpc.set_v3_tier(WETH, USDC, 3000, (2_000 * 10**6, 10**18))
        venue = ConcentratedLiquidityVenue(rpc, config)
        quote = Quote(
            venue=Venue.UNISWAP_V3,
            router="router",
            token_in=WETH,
            token_out=USDC,
            amount_in=10**18,
            amount_out=1_980 * 10**6,
            route=(WETH, USDC),
            fee=3000,
        )

        impact = asyncio.run(PriceImpactEstimator().estimate(venue, quote, 18, 6))

        assert impact == Decimal(1)
        assert rpc.calls_to("quoteExactInputSingle") == [(WETH, USDC, 3000, 10**16, 0)]
