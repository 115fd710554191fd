"""Ethereum client composing balance lookups, pricing and swap simulation."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from eth_account import Account

from .config import DEFAULT_DEADLINE_SECONDS, MAINNET, NATIVE_DECIMALS, NATIVE_SYMBOL, DexConfig
from .contracts import ERC20_ABI
from .errors import InputError, RPCError, TransactionError
from .models import Balance, Quote, SwapResult, TokenInfo, TokenPrice
from .oracle import PriceOracle
from .router import QuoteEngine
from .swap import SwapTransactionBuilder, WalletSigner
from .tokens import TokenResolver, is_native, to_address
from .transport import Web3RPC
from .units import decimal_to_units, units_to_decimal

logger = logging.getLogger(__name__)


class EthereumClient:
    """Entry point used by the MCP tools.

    The chain id, wallet and RPC handle are fixed at construction, so one
    client can serve concurrent requests.
    """

    def __init__(
        self,
        rpc,
        account: Account,
        chain_id: int,
        config: DexConfig = MAINNET,
        deadline_seconds: int = DEFAULT_DEADLINE_SECONDS,
    ):
        self.rpc = rpc
        self.config = config
        self.chain_id = chain_id
        self.deadline_seconds = deadline_seconds
        self.signer = WalletSigner(account, rpc, chain_id)
        self.tokens = TokenResolver(rpc, config)
        self.engine = QuoteEngine.for_config(rpc, config)
        self.oracle = PriceOracle(self.engine, self.tokens, config)
        self.builder = SwapTransactionBuilder(rpc, self.signer)

    @classmethod
    async def connect(
        cls,
        rpc_url: str,
        private_key: str,
        config: DexConfig = MAINNET,
        deadline_seconds: int = DEFAULT_DEADLINE_SECONDS,
    ) -> "EthereumClient":
        rpc = Web3RPC(rpc_url)
        try:
            account = Account.from_key(private_key)
        except Exception as e:
            raise InputError(f"Failed to parse PRIVATE_KEY: {e}") from e

        chain_id = await rpc.get_chain_id()
        logger.info(f"Ethereum client initialized: wallet={account.address} chain_id={chain_id} rpc={rpc_url}")
        return cls(rpc, account, chain_id, config, deadline_seconds)

    @property
    def wallet_address(self) -> str:
        return self.signer.address

    async def get_balance(self, address: str, token_address: Optional[str] = None) -> Balance:
        # the native sentinel has no contract to call balanceOf on
        if token_address and not is_native(token_address):
            return await self.get_erc20_balance(address, token_address)
        return await self.get_eth_balance(address)

    async def get_eth_balance(self, address: str) -> Balance:
        address = to_address(address)
        balance_wei = await self.rpc.get_balance(address)
        balance = units_to_decimal(balance_wei, NATIVE_DECIMALS)

        return Balance(
            address=address,
            token_address=None,
            symbol=NATIVE_SYMBOL,
            balance=balance,
            decimals=NATIVE_DECIMALS,
            formatted_balance=f"{balance:.6f} {NATIVE_SYMBOL}",
        )

    async def get_erc20_balance(self, address: str, token_address: str) -> Balance:
        address = to_address(address)
        token_address = to_address(token_address, "token_address")
        token_info = await self.tokens.get_token_info(token_address)

        balance_raw = await self.rpc.call(token_address, ERC20_ABI, "balanceOf", [address])
        balance = units_to_decimal(int(balance_raw), token_info.decimals)

        return Balance(
            address=address,
            token_address=token_address,
            symbol=token_info.symbol,
            balance=balance,
            decimals=token_info.decimals,
            formatted_balance=f"{balance:.6f} {token_info.symbol}",
        )

    async def get_token_info(self, address: str) -> TokenInfo:
        return await self.tokens.get_token_info(address)

    async def get_token_price(
        self,
        token_address: Optional[str] = None,
        symbol: Optional[str] = None,
        quote_currency: str = "USD",
    ) -> TokenPrice:
        return await self.oracle.get_token_price(token_address, symbol, quote_currency)

    async def quote_best_swap(
        self,
        token_in: str,
        token_in_decimals: int,
        token_out: str,
        token_out_decimals: int,
        amount_in: int,
    ) -> Quote:
        return await self.engine.quote_best_swap(
            token_in, token_in_decimals, token_out, token_out_decimals, amount_in
        )

    async def swap_tokens(
        self,
        from_token: str,
        to_token: str,
        amount: str,
        slippage_tolerance: Union[float, str, Decimal] = 0.5,
    ) -> SwapResult:
        """Quote a swap and sign (but never send) the matching router call.

        Args:
            from_token: Address of the token to sell
            to_token: Address of the token to buy
            amount: Amount of from_token in token units, e.g. '1.5'
            slippage_tolerance: Percentage, e.g. 0.5 for 0.5%

        Returns:
            SwapResult with the quote, gas figures and signed transaction.
        """
        from_token = to_address(from_token, "from_token")
        to_token = to_address(to_token, "to_token")

        try:
            input_amount = Decimal(str(amount))
            slippage = Decimal(str(slippage_tolerance))
        except InvalidOperation:
            raise InputError(f"Invalid swap amount or slippage: {amount}, {slippage_tolerance}")
        if not input_amount.is_finite() or input_amount <= 0:
            raise InputError("Swap amount must be greater than 0")
        if not slippage.is_finite() or slippage < 0:
            raise InputError("Slippage tolerance cannot be negative")
        if from_token == to_token:
            raise InputError("Input and output tokens are the same, nothing to swap")

        from_info = await self.tokens.get_token_info(from_token)
        to_info = await self.tokens.get_token_info(to_token)

        amount_in = decimal_to_units(input_amount, from_info.decimals)
        quote = await self.engine.quote_best_swap(
            from_token, from_info.decimals, to_token, to_info.decimals, amount_in
        )
        output_amount = units_to_decimal(quote.amount_out, to_info.decimals)

        gas_estimate = await self.builder.estimate_gas(quote, self.deadline_seconds)
        try:
            gas_price_wei = await self.rpc.get_gas_price()
        except RPCError as e:
            raise TransactionError(f"Failed to fetch gas price: {e}") from e
        gas_price = units_to_decimal(gas_price_wei, 9)
        total_cost = units_to_decimal(gas_price_wei * gas_estimate, NATIVE_DECIMALS)

        minimum_output = self.builder.minimum_output(output_amount, slippage)
        min_out_units = decimal_to_units(minimum_output, to_info.decimals)
        transaction_data = await self.builder.build_signed_swap(quote, min_out_units, self.deadline_seconds)

        logger.info(
            f"Swap simulated: {input_amount} {from_info.symbol} -> {output_amount} {to_info.symbol} "
            f"on {quote.venue.value}"
        )
        return SwapResult(
            from_token=from_token,
            to_token=to_token,
            input_amount=input_amount,
            output_amount=output_amount,
            price_impact=quote.price_impact_pct,
            gas_estimate=gas_estimate,
            gas_price=gas_price,
            total_cost=total_cost,
            slippage_tolerance=slippage,
            minimum_output=minimum_output,
            protocol=quote.venue.value,
            fee_tier=quote.fee,
            router_address=quote.router,
            path=list(quote.route),
            transaction_data=transaction_data,
        )
