"""Pytest configuration and fixtures."""

from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pytest
from eth_account import Account
from web3 import Web3

from ethereum_mcp.client import EthereumClient
from ethereum_mcp.config import MAINNET, DexConfig
from ethereum_mcp.errors import ContractRevertError, RPCError


def addr(byte: str) -> str:
    """Checksum address made of one repeated byte, e.g. addr("a1")."""
    return Web3.to_checksum_address("0x" + byte * 20)


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

WETH = addr("e0")
USDC = addr("c0")
DAI = addr("d0")
WBTC = addr("b0")
TOKEN_A = addr("a1")
TOKEN_B = addr("a2")

TEST_PRIVATE_KEY = "0x" + "11" * 32
TEST_CHAIN_ID = 1

# amount_out as a fixed (numerator, denominator) rate, a callable, or an error to raise
Rate = Union[Tuple[int, int], Callable[[int], int], Exception]


def _apply(rate: Rate, amount_in: int) -> int:
    if isinstance(rate, Exception):
        raise rate
    if callable(rate):
        return rate(amount_in)
    num, denom = rate
    return amount_in * num // denom


class FakeRPC:
    """In-memory stand-in for Web3RPC.

    Configure pairs, V2 routes and V3 tiers, then assert on `calls`.
    Unconfigured V2 routes and V3 tiers revert, as the real contracts do.
    """

    def __init__(self):
        self.tokens: Dict[str, Tuple[str, str, int]] = {}
        self.native_balances: Dict[str, int] = {}
        self.token_balances: Dict[Tuple[str, str], int] = {}
        self.pairs: set = set()
        self.v2_routes: Dict[Tuple[str, ...], Rate] = {}
        self.v3_tiers: Dict[Tuple[str, str, int], Rate] = {}
        self.failures: Dict[str, Exception] = {}
        self.chain_id = TEST_CHAIN_ID
        self.gas_price = 20 * 10**9
        self.gas_estimate = 150_000
        self.nonce = 7
        self.estimate_error: Optional[Exception] = None
        self.calls: List[Tuple[str, str, Tuple[Any, ...]]] = []
        self.estimated: List[Dict[str, Any]] = []

    # configuration helpers

    def add_token(self, address: str, symbol: str, decimals: int, name: Optional[str] = None):
        self.tokens[address.lower()] = (symbol, name or symbol, decimals)

    def add_pair(self, token_a: str, token_b: str):
        self.pairs.add(frozenset((token_a.lower(), token_b.lower())))

    def set_v2_route(self, route: Tuple[str, ...], rate: Rate):
        self.v2_routes[tuple(t.lower() for t in route)] = rate

    def set_v3_tier(self, token_in: str, token_out: str, fee: int, rate: Rate):
        self.v3_tiers[(token_in.lower(), token_out.lower(), fee)] = rate

    def calls_to(self, function: str) -> List[Tuple[Any, ...]]:
        return [args for name, _, args in self.calls if name == function]

    # transport interface

    async def get_balance(self, address: str) -> int:
        self.calls.append(("eth_getBalance", address, ()))
        return self.native_balances.get(address.lower(), 0)

    async def get_chain_id(self) -> int:
        return self.chain_id

    async def get_gas_price(self) -> int:
        self.calls.append(("eth_gasPrice", "", ()))
        if "eth_gasPrice" in self.failures:
            raise self.failures["eth_gasPrice"]
        return self.gas_price

    async def get_transaction_count(self, address: str) -> int:
        self.calls.append(("eth_getTransactionCount", address, ()))
        return self.nonce

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        self.estimated.append(dict(tx))
        if self.estimate_error is not None:
            raise self.estimate_error
        return self.gas_estimate

    async def call(self, address: str, abi, function: str, args=()) -> Any:
        args = tuple(args)
        self.calls.append((function, address, args))
        if function in self.failures:
            raise self.failures[function]

        if function in ("symbol", "name", "decimals"):
            if address.lower() not in self.tokens:
                raise RPCError(f"{function}@{address} failed: no contract code")
            symbol, name, decimals = self.tokens[address.lower()]
            return {"symbol": symbol, "name": name, "decimals": decimals}[function]

        if function == "balanceOf":
            return self.token_balances.get((address.lower(), args[0].lower()), 0)

        if function == "getPair":
            key = frozenset((args[0].lower(), args[1].lower()))
            return addr("fa") if key in self.pairs else ZERO_ADDRESS

        if function == "getAmountsOut":
            amount_in, path = args
            key = tuple(t.lower() for t in path)
            if key not in self.v2_routes:
                raise ContractRevertError("UniswapV2Library: INSUFFICIENT_LIQUIDITY")
            amount_out = _apply(self.v2_routes[key], amount_in)
            return [amount_in] + [0] * (len(path) - 2) + [amount_out]

        if function == "quoteExactInputSingle":
            token_in, token_out, fee, amount_in, _ = args
            key = (token_in.lower(), token_out.lower(), fee)
            if key not in self.v3_tiers:
                raise ContractRevertError("execution reverted")
            return _apply(self.v3_tiers[key], amount_in)

        raise AssertionError(f"Unexpected contract call {function}")


@pytest.fixture
def config() -> DexConfig:
    return replace(
        MAINNET,
        wrapped_native=WETH,
        stable_token=USDC,
        stable_decimals=6,
        v2_router=addr("21"),
        v2_factory=addr("2f"),
        v3_quoter=addr("3a"),
        v3_router=addr("31"),
        token_symbols={"USDC": USDC, "DAI": DAI, "WETH": WETH, "WBTC": WBTC},
    )


@pytest.fixture
def rpc() -> FakeRPC:
    fake = FakeRPC()
    fake.add_token(WETH, "WETH", 18, "Wrapped Ether")
    fake.add_token(USDC, "USDC", 6, "USD Coin")
    fake.add_token(DAI, "DAI", 18, "Dai Stablecoin")
    fake.add_token(TOKEN_A, "AAA", 18)
    fake.add_token(TOKEN_B, "BBB", 8)
    return fake


@pytest.fixture
def account():
    return Account.from_key(TEST_PRIVATE_KEY)


@pytest.fixture
def client(rpc, account, config) -> EthereumClient:
    return EthereumClient(rpc, account, TEST_CHAIN_ID, config=config)
