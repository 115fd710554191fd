"""Async facade over a synchronous web3 HTTP provider."""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Sequence

from web3 import Web3
from web3.exceptions import ContractLogicError

from .errors import ContractRevertError, RPCError

logger = logging.getLogger(__name__)


class Web3RPC:
    """Blockchain RPC transport.

    Every call runs the blocking web3 request in the default executor and
    classifies failures: reverts become ContractRevertError, everything else
    RPCError.
    """

    def __init__(self, rpc_url: str, timeout: float = 30.0):
        self.rpc_url = rpc_url
        self.web3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))

    async def _run(self, description: str, fn: Callable[[], Any]) -> Any:
        try:
            return await asyncio.get_event_loop().run_in_executor(None, fn)
        except ContractLogicError as e:
            raise ContractRevertError(f"{description} reverted: {e}") from e
        except Exception as e:
            raise RPCError(f"{description} failed: {e}") from e

    async def get_balance(self, address: str) -> int:
        return await self._run("eth_getBalance", lambda: self.web3.eth.get_balance(address))

    async def get_chain_id(self) -> int:
        return await self._run("eth_chainId", lambda: self.web3.eth.chain_id)

    async def get_gas_price(self) -> int:
        return await self._run("eth_gasPrice", lambda: self.web3.eth.gas_price)

    async def get_transaction_count(self, address: str) -> int:
        return await self._run(
            "eth_getTransactionCount", lambda: self.web3.eth.get_transaction_count(address)
        )

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        return await self._run("eth_estimateGas", lambda: self.web3.eth.estimate_gas(tx))

    async def call(self, address: str, abi: List[Dict], function: str, args: Sequence[Any] = ()) -> Any:
        """Invoke a contract function through eth_call and return the decoded output."""
        contract = self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        return await self._run(
            f"{function}@{address}",
            lambda: getattr(contract.functions, function)(*args).call(),
        )
