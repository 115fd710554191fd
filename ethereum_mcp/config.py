"""Chain and venue configuration."""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

NATIVE_TOKEN_ADDRESS = "0x0000000000000000000000000000000000000000"
NATIVE_SYMBOL = "ETH"
NATIVE_NAME = "Ethereum"
NATIVE_DECIMALS = 18

# V3 fee tiers in hundredths of a basis point
DEFAULT_FEE_TIERS = (500, 3000, 10000)

# Reference trade for price impact: 1% of the input
DEFAULT_IMPACT_REFERENCE_BPS = 100

DEFAULT_DEADLINE_SECONDS = 15 * 60


@dataclass(frozen=True)
class DexConfig:
    """Well-known contract addresses and routing constants for one chain."""
    name: str
    wrapped_native: str
    stable_token: str
    stable_decimals: int
    v2_router: str
    v2_factory: str
    v3_quoter: str
    v3_router: str
    token_symbols: Dict[str, str] = field(default_factory=dict)
    fee_tiers: Tuple[int, ...] = DEFAULT_FEE_TIERS
    impact_reference_bps: int = DEFAULT_IMPACT_REFERENCE_BPS

    def resolve_symbol(self, symbol: str) -> Optional[str]:
        """Look up a well-known token address by symbol (case-insensitive)."""
        return self.token_symbols.get(symbol.upper())


WETH_ADDRESS = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC_ADDRESS = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"

MAINNET = DexConfig(
    name="Ethereum",
    wrapped_native=WETH_ADDRESS,
    stable_token=USDC_ADDRESS,
    stable_decimals=6,
    v2_router="0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D",
    v2_factory="0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f",
    v3_quoter="0xb27308f9F90D607463bb33eA1BeBb41C27CE5AB6",
    v3_router="0xE592427A0AEce92De3Edee1F18E0157C05861564",
    token_symbols={
        "USDC": USDC_ADDRESS,
        "USDT": "0xdAC17F958D2ee523a2206206994597C13D831ec7",
        "DAI": "0x6B175474E89094C44Da98b954EedeAC495271d0F",
        "WETH": WETH_ADDRESS,
        "WBTC": "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599",
    },
)


@dataclass(frozen=True)
class ServerSettings:
    """Process settings read from the environment."""
    private_key: str
    rpc_url: Optional[str] = None
    transport: str = "stdio"
    deadline_seconds: int = DEFAULT_DEADLINE_SECONDS


def load_settings() -> ServerSettings:
    """Read server settings from environment variables."""
    private_key = os.getenv("PRIVATE_KEY")
    if not private_key:
        raise ValueError("PRIVATE_KEY environment variable is required")

    deadline = os.getenv("SWAP_DEADLINE_SECONDS")
    return ServerSettings(
        private_key=private_key,
        rpc_url=os.getenv("ETHEREUM_RPC_URL") or None,
        transport=os.getenv("TRANSPORT", "stdio"),
        deadline_seconds=int(deadline) if deadline else DEFAULT_DEADLINE_SECONDS,
    )
