"""Tool implementations: call into the client and render JSON results."""

import json
import logging
from typing import Optional

from .client import EthereumClient

logger = logging.getLogger(__name__)


async def get_balance(client: EthereumClient, address: str, token_address: Optional[str] = None) -> str:
    logger.info(f"Balance query - address: {address}, token: {token_address}")
    balance = await client.get_balance(address, token_address)
    return json.dumps(balance.to_dict(), indent=2)


async def get_token_price(
    client: EthereumClient,
    token_address: Optional[str] = None,
    symbol: Optional[str] = None,
    quote_currency: str = "USD",
) -> str:
    logger.info(f"Price query - address: {token_address}, symbol: {symbol}, quote currency: {quote_currency}")
    price = await client.get_token_price(token_address, symbol, quote_currency)
    return json.dumps(price.to_dict(), indent=2)


async def swap_tokens(
    client: EthereumClient,
    from_token: str,
    to_token: str,
    amount: str,
    slippage_tolerance: float = 0.5,
) -> str:
    logger.info(
        f"Swap simulation - from: {from_token} to: {to_token}, amount: {amount}, slippage: {slippage_tolerance}%"
    )
    result = await client.swap_tokens(from_token, to_token, amount, slippage_tolerance)
    return json.dumps(result.to_dict(), indent=2)
