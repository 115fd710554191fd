#!/usr/bin/env python3
"""
Ethereum MCP Server (FastMCP Implementation)
Provides AI agents with tools to query balances, price tokens and simulate
Uniswap V2/V3 swaps on Ethereum.
"""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass
from typing import Optional

from mcp.server.fastmcp import Context, FastMCP

from . import tools
from .client import EthereumClient
from .config import MAINNET, load_settings
from .rpc import get_best_rpc_url, get_recommended_providers

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@dataclass
class EthereumMCPContext:
    """Context for the Ethereum MCP server."""
    client: EthereumClient
    rpc_url: str


@asynccontextmanager
async def ethereum_lifespan(server: FastMCP) -> AsyncIterator[EthereumMCPContext]:
    """Manages the Ethereum client lifecycle."""
    settings = load_settings()

    if settings.rpc_url:
        rpc_url = settings.rpc_url
    else:
        logger.info("ETHEREUM_RPC_URL not set, selecting the best RPC automatically...")
        rpc_url = await get_best_rpc_url()

    client = await EthereumClient.connect(
        rpc_url,
        settings.private_key,
        config=MAINNET,
        deadline_seconds=settings.deadline_seconds,
    )
    logger.info(f"Using RPC: {rpc_url}")

    try:
        yield EthereumMCPContext(client=client, rpc_url=rpc_url)
    finally:
        logger.info("Ethereum MCP server shutdown complete")


# Initialize FastMCP server
mcp = FastMCP(
    "ethereum-mcp",
    instructions="Query ETH/ERC20 balances, token prices and simulate Uniswap swaps on Ethereum",
    lifespan=ethereum_lifespan,
)


@mcp.tool()
async def get_balance(ctx: Context, address: str, token_address: Optional[str] = None) -> str:
    """Query ETH and ERC20 token balances for Ethereum addresses.

    Args:
        address: Ethereum address
        token_address: ERC20 token contract address (optional, queries ETH balance if not provided)

    Returns:
        JSON string with the balance information.
    """
    try:
        eth_ctx = ctx.request_context.lifespan_context
        return await tools.get_balance(eth_ctx.client, address, token_address)
    except Exception as e:
        logger.error(f"Error getting balance: {e}")
        return f"Error getting balance: {str(e)}"


@mcp.tool()
async def get_token_price(
    ctx: Context,
    token_address: Optional[str] = None,
    symbol: Optional[str] = None,
    quote_currency: str = "USD",
) -> str:
    """Get current token price in USD or ETH.

    Args:
        token_address: Token contract address
        symbol: Token symbol (e.g., USDC, WETH), used when token_address is not given
        quote_currency: Quote currency (USD or ETH)

    Returns:
        JSON string with the price and capture timestamp.
    """
    try:
        eth_ctx = ctx.request_context.lifespan_context
        return await tools.get_token_price(eth_ctx.client, token_address, symbol, quote_currency)
    except Exception as e:
        logger.error(f"Error getting token price: {e}")
        return f"Error getting token price: {str(e)}"


@mcp.tool()
async def swap_tokens(
    ctx: Context,
    from_token: str,
    to_token: str,
    amount: str,
    slippage_tolerance: float = 0.5,
) -> str:
    """Simulate a token swap (signs but does not send the transaction).

    Args:
        from_token: Source token address
        to_token: Destination token address
        amount: Swap amount in source token units (e.g. '1.5')
        slippage_tolerance: Slippage tolerance as percentage (0.5 means 0.5%)

    Returns:
        JSON string with the best quote, gas estimate and signed transaction.
    """
    try:
        eth_ctx = ctx.request_context.lifespan_context
        return await tools.swap_tokens(eth_ctx.client, from_token, to_token, amount, slippage_tolerance)
    except Exception as e:
        logger.error(f"Error simulating swap: {e}")
        return f"Error simulating swap: {str(e)}"


@mcp.tool()
async def get_server_info(ctx: Context) -> str:
    """Get the wallet address, chain ID and RPC endpoint used by this server.

    Returns:
        JSON string with the server's connection details.
    """
    try:
        eth_ctx = ctx.request_context.lifespan_context
        client = eth_ctx.client
        info = {
            "wallet_address": client.wallet_address,
            "chain_id": client.chain_id,
            "chain": client.config.name,
            "rpc_url": eth_ctx.rpc_url,
        }
        return json.dumps(info, indent=2)
    except Exception as e:
        logger.error(f"Error getting server info: {e}")
        return f"Error getting server info: {str(e)}"


@mcp.tool()
async def list_rpc_providers(ctx: Context) -> str:
    """List the free public RPC providers this server can fall back to.

    Returns:
        JSON string with provider names, URLs and rate limits.
    """
    providers = [asdict(provider) for provider in get_recommended_providers()]
    return json.dumps({"providers": providers, "env_var": "ETHEREUM_RPC_URL"}, indent=2)


async def main():
    """Main function to run the MCP server."""
    transport = load_settings().transport

    if transport == "stdio":
        await mcp.run_stdio_async()
    elif transport == "sse":
        await mcp.run_sse_async()
    else:
        logger.error(f"Unsupported transport: {transport}")
        return
