"""Ethereum MCP server: balances, token prices and Uniswap V2/V3 swap quotes."""

__version__ = "0.1.0"
