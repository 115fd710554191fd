"""Swap transaction construction and signing."""

import logging
import time
from decimal import ROUND_DOWN, Decimal, localcontext
from typing import Any, Dict

from eth_account import Account

from .contracts import (
    V2_SWAP_EXACT_TOKENS_SIGNATURE,
    V2_SWAP_EXACT_TOKENS_TYPES,
    V3_EXACT_INPUT_SINGLE_SIGNATURE,
    V3_EXACT_INPUT_SINGLE_TYPES,
    encode_call,
)
from .errors import InputError, RPCError, TransactionError
from .models import Quote, Venue
from .units import DECIMAL_PRECISION, UINT256_MAX

logger = logging.getLogger(__name__)


class WalletSigner:
    """Signs transactions with a local key, filling any unset fields from the node."""

    def __init__(self, account: Account, rpc, chain_id: int):
        self.account = account
        self.rpc = rpc
        self.chain_id = chain_id

    @property
    def address(self) -> str:
        return self.account.address

    async def sign_transaction(self, tx: Dict[str, Any]) -> bytes:
        tx = dict(tx)
        tx.setdefault("from", self.address)
        tx.setdefault("chainId", self.chain_id)

        try:
            if "gas" not in tx:
                tx["gas"] = await self.rpc.estimate_gas(tx)
            if "gasPrice" not in tx:
                tx["gasPrice"] = await self.rpc.get_gas_price()
            if "nonce" not in tx:
                tx["nonce"] = await self.rpc.get_transaction_count(self.address)
        except RPCError as e:
            raise TransactionError(f"Failed to prepare transaction: {e}") from e

        unsigned = {key: value for key, value in tx.items() if key != "from"}
        try:
            signed = self.account.sign_transaction(unsigned)
        except Exception as e:
            raise TransactionError(f"Failed to sign transaction: {e}") from e
        return bytes(signed.raw_transaction)


class SwapTransactionBuilder:
    """Builds router calls for a selected quote."""

    def __init__(self, rpc, signer: WalletSigner):
        self.rpc = rpc
        self.signer = signer

    @staticmethod
    def minimum_output(output_amount: Decimal, slippage_tolerance: Decimal) -> Decimal:
        """Output reduced by the slippage percentage, never above output_amount."""
        if slippage_tolerance < 0:
            raise InputError("Slippage tolerance cannot be negative")
        with localcontext() as ctx:
            ctx.prec = DECIMAL_PRECISION
            ctx.rounding = ROUND_DOWN
            return output_amount * (Decimal(1) - slippage_tolerance / Decimal(100))

    @staticmethod
    def deadline_after(seconds: int) -> int:
        if seconds < 0:
            raise TransactionError("Deadline offset cannot be negative")
        deadline = int(time.time()) + seconds
        if deadline > UINT256_MAX:
            raise TransactionError("Deadline overflow")
        return deadline

    def build_transaction(
        self,
        quote: Quote,
        amount_out_min: int,
        recipient: str,
        deadline_seconds: int,
    ) -> Dict[str, Any]:
        """Unsigned router call for the quote's venue, with zero value attached."""
        deadline = self.deadline_after(deadline_seconds)

        if quote.venue == Venue.UNISWAP_V2:
            data = encode_call(
                V2_SWAP_EXACT_TOKENS_SIGNATURE,
                V2_SWAP_EXACT_TOKENS_TYPES,
                [quote.amount_in, amount_out_min, list(quote.route), recipient, deadline],
            )
        elif quote.venue == Venue.UNISWAP_V3:
            if quote.fee is None:
                raise TransactionError("V3 quote is missing its fee tier")
            params = (
                quote.token_in,
                quote.token_out,
                quote.fee,
                recipient,
                deadline,
                quote.amount_in,
                amount_out_min,
                0,  # no price limit
            )
            data = encode_call(V3_EXACT_INPUT_SINGLE_SIGNATURE, V3_EXACT_INPUT_SINGLE_TYPES, [params])
        else:
            raise TransactionError(f"Unsupported venue: {quote.venue}")

        return {
            "from": self.signer.address,
            "to": quote.router,
            "data": data,
            "value": 0,
            "chainId": self.signer.chain_id,
        }

    async def estimate_gas(self, quote: Quote, deadline_seconds: int) -> int:
        """Gas for the quote, using its own output as the minimum."""
        tx = self.build_transaction(quote, quote.amount_out, self.signer.address, deadline_seconds)
        try:
            return int(await self.rpc.estimate_gas(tx))
        except RPCError as e:
            raise TransactionError(f"Gas estimation failed: {e}") from e

    async def build_signed_swap(self, quote: Quote, amount_out_min: int, deadline_seconds: int) -> str:
        """Signed, hex-encoded swap paying out to the server wallet."""
        tx = self.build_transaction(quote, amount_out_min, self.signer.address, deadline_seconds)
        raw = await self.signer.sign_transaction(tx)
        return "0x" + raw.hex()
