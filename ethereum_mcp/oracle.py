"""Token prices derived from swap quotes."""

import logging
import time
from decimal import Decimal
from typing import Optional

from .config import DexConfig
from .errors import InputError
from .models import TokenInfo, TokenPrice
from .router import QuoteEngine
from .tokens import TokenResolver, is_native, same_address, to_address
from .units import decimal_to_units, units_to_decimal

logger = logging.getLogger(__name__)

SUPPORTED_QUOTE_CURRENCIES = ("ETH", "USD")


class PriceOracle:
    """Prices a token in ETH (via the wrapped native token) or USD (via a stablecoin)."""

    def __init__(self, engine: QuoteEngine, resolver: TokenResolver, config: DexConfig):
        self.engine = engine
        self.resolver = resolver
        self.config = config

    async def get_token_price(
        self,
        token_address: Optional[str] = None,
        symbol: Optional[str] = None,
        quote_currency: str = "USD",
    ) -> TokenPrice:
        quote_currency = quote_currency.upper()
        if quote_currency not in SUPPORTED_QUOTE_CURRENCIES:
            raise InputError(f"Unsupported quote currency: {quote_currency}")

        if token_address:
            token = to_address(token_address, "token_address")
        elif symbol:
            token = self.resolver.resolve_symbol(symbol)
            if token is None:
                raise InputError(f"Unknown token symbol: {symbol}")
        else:
            raise InputError("Either token_address or symbol is required")

        token_info = await self.resolver.get_token_info(token)

        if quote_currency == "ETH":
            price = await self.price_in_eth(token_info)
        else:
            price = await self.price_in_usd(token_info)

        return TokenPrice(
            token_address=token_info.address,
            symbol=token_info.symbol,
            price=price,
            quote_currency=quote_currency,
            timestamp=int(time.time()),
        )

    async def price_in_eth(self, token_info: TokenInfo) -> Decimal:
        base = self.config.wrapped_native
        if same_address(token_info.address, base) or is_native(token_info.address):
            return Decimal(1)

        amount_in = decimal_to_units(Decimal(1), token_info.decimals)
        quote = await self.engine.quote_best_swap(
            token_info.address, token_info.decimals, base, 18, amount_in
        )
        return units_to_decimal(quote.amount_out, 18)

    async def price_in_usd(self, token_info: TokenInfo) -> Decimal:
        price_in_eth = await self.price_in_eth(token_info)
        eth_price_usd = await self.eth_price_in_usd()
        return price_in_eth * eth_price_usd

    async def eth_price_in_usd(self) -> Decimal:
        quote = await self.engine.quote_best_swap(
            self.config.wrapped_native,
            18,
            self.config.stable_token,
            self.config.stable_decimals,
            10**18,
        )
        return units_to_decimal(quote.amount_out, self.config.stable_decimals)
