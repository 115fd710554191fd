"""Token metadata resolution."""

import asyncio
import logging
from typing import Optional

from web3 import Web3

from .config import NATIVE_DECIMALS, NATIVE_NAME, NATIVE_SYMBOL, NATIVE_TOKEN_ADDRESS, DexConfig
from .contracts import ERC20_ABI
from .errors import InputError, TokenResolutionError
from .models import TokenInfo

logger = logging.getLogger(__name__)

NATIVE_TOKEN = TokenInfo(
    address=NATIVE_TOKEN_ADDRESS,
    symbol=NATIVE_SYMBOL,
    name=NATIVE_NAME,
    decimals=NATIVE_DECIMALS,
    is_native=True,
)


def to_address(value: str, label: str = "address") -> str:
    """Validate an address and return it in checksum form."""
    if not isinstance(value, str) or not Web3.is_address(value):
        raise InputError(f"Invalid {label} format: {value}")
    return Web3.to_checksum_address(value)


def same_address(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def is_native(address: str) -> bool:
    return same_address(address, NATIVE_TOKEN_ADDRESS)


class TokenResolver:
    """Resolves ERC-20 metadata and well-known symbols."""

    def __init__(self, rpc, config: DexConfig):
        self.rpc = rpc
        self.config = config

    async def get_token_info(self, address: str) -> TokenInfo:
        """Fetch symbol, name and decimals for a token.

        The native sentinel address short-circuits to a constant descriptor.
        The three ERC-20 queries run concurrently and any failure fails the
        whole lookup.
        """
        if is_native(address):
            return NATIVE_TOKEN

        address = to_address(address, "token address")
        try:
            symbol, name, decimals = await asyncio.gather(
                self.rpc.call(address, ERC20_ABI, "symbol"),
                self.rpc.call(address, ERC20_ABI, "name"),
                self.rpc.call(address, ERC20_ABI, "decimals"),
            )
        except Exception as e:
            raise TokenResolutionError(f"Failed to query ERC20 metadata for {address}: {e}") from e

        return TokenInfo(
            address=address,
            symbol=symbol,
            name=name,
            decimals=int(decimals),
            is_native=False,
        )

    def resolve_symbol(self, symbol: str) -> Optional[str]:
        return self.config.resolve_symbol(symbol)
