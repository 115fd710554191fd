"""Contract ABIs and call data encoding."""

from typing import Any, List, Sequence

from eth_abi import encode
from web3 import Web3

# ERC-20 ABI (minimal)
ERC20_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "type": "function"
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "type": "function"
    },
    {
        "constant": True,
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "type": "function"
    },
    {
        "constant": True,
        "inputs": [],
        "name": "name",
        "outputs": [{"name": "", "type": "string"}],
        "type": "function"
    }
]

UNISWAP_V2_FACTORY_ABI = [
    {
        "name": "getPair",
        "type": "function",
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"}
        ],
        "outputs": [{"name": "pair", "type": "address"}],
        "stateMutability": "view"
    }
]

UNISWAP_V2_ROUTER_ABI = [
    {
        "name": "getAmountsOut",
        "type": "function",
        "inputs": [
            {"name": "amountIn", "type": "uint256"},
            {"name": "path", "type": "address[]"}
        ],
        "outputs": [{"name": "amounts", "type": "uint256[]"}],
        "stateMutability": "view"
    }
]

# Not a view function; only ever invoked through eth_call
UNISWAP_V3_QUOTER_ABI = [
    {
        "name": "quoteExactInputSingle",
        "type": "function",
        "inputs": [
            {"name": "tokenIn", "type": "address"},
            {"name": "tokenOut", "type": "address"},
            {"name": "fee", "type": "uint24"},
            {"name": "amountIn", "type": "uint256"},
            {"name": "sqrtPriceLimitX96", "type": "uint160"}
        ],
        "outputs": [{"name": "amountOut", "type": "uint256"}],
        "stateMutability": "nonpayable"
    }
]

V2_SWAP_EXACT_TOKENS_SIGNATURE = "swapExactTokensForTokens(uint256,uint256,address[],address,uint256)"
V2_SWAP_EXACT_TOKENS_TYPES = ["uint256", "uint256", "address[]", "address", "uint256"]

# SwapRouter.exactInputSingle takes an ExactInputSingleParams struct
V3_EXACT_INPUT_SINGLE_PARAMS = "(address,address,uint24,address,uint256,uint256,uint256,uint160)"
V3_EXACT_INPUT_SINGLE_SIGNATURE = f"exactInputSingle({V3_EXACT_INPUT_SINGLE_PARAMS})"
V3_EXACT_INPUT_SINGLE_TYPES = [V3_EXACT_INPUT_SINGLE_PARAMS]


def function_selector(signature: str) -> bytes:
    """First four bytes of the keccak hash of a function signature."""
    return bytes(Web3.keccak(text=signature)[:4])


def encode_call(signature: str, arg_types: List[str], args: Sequence[Any]) -> str:
    """ABI-encode a function call as 0x-prefixed hex call data."""
    data = function_selector(signature) + encode(arg_types, list(args))
    return "0x" + data.hex()
