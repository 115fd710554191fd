"""Data types shared by the quoting engine and the MCP tools."""

from dataclasses import asdict, dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# Ordered token addresses, length 2 (direct) or 3 (via the base asset)
Route = Tuple[str, ...]


class Venue(str, Enum):
    UNISWAP_V2 = "UniswapV2"
    UNISWAP_V3 = "UniswapV3"


class QuoteStatus(str, Enum):
    FOUND = "found"
    NO_LIQUIDITY = "no_liquidity"
    FAILED = "failed"


@dataclass(frozen=True)
class CandidateQuote:
    """Outcome of quoting a single route or fee tier."""
    status: QuoteStatus
    amount_out: int = 0
    error: Optional[Exception] = None

    @classmethod
    def found(cls, amount_out: int) -> "CandidateQuote":
        return cls(QuoteStatus.FOUND, amount_out=amount_out)

    @classmethod
    def no_liquidity(cls) -> "CandidateQuote":
        return cls(QuoteStatus.NO_LIQUIDITY)

    @classmethod
    def failed(cls, error: Exception) -> "CandidateQuote":
        return cls(QuoteStatus.FAILED, error=error)


@dataclass(frozen=True)
class Quote:
    """Best quote produced by one venue for one request."""
    venue: Venue
    router: str
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int
    route: Route
    fee: Optional[int] = None
    price_impact_pct: Decimal = Decimal(0)


@dataclass(frozen=True)
class TokenInfo:
    address: str
    symbol: str
    name: str
    decimals: int
    is_native: bool


@dataclass(frozen=True)
class Balance:
    address: str
    token_address: Optional[str]
    symbol: str
    balance: Decimal
    decimals: int
    formatted_balance: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["balance"] = str(self.balance)
        return data


@dataclass(frozen=True)
class TokenPrice:
    token_address: Optional[str]
    symbol: str
    price: Decimal
    quote_currency: str
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["price"] = str(self.price)
        return data


@dataclass(frozen=True)
class SwapResult:
    """Reported outcome of a simulated swap."""
    from_token: str
    to_token: str
    input_amount: Decimal
    output_amount: Decimal
    price_impact: Decimal
    gas_estimate: int
    gas_price: Decimal  # gwei
    total_cost: Decimal  # native asset
    slippage_tolerance: Decimal
    minimum_output: Decimal
    protocol: str
    fee_tier: Optional[int]
    router_address: str
    path: List[str]
    transaction_data: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Decimal):
                data[key] = str(value)
        return data
