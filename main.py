import asyncio
import sys
from ethereum_mcp.server import main as run_server

def main():
    """Launch the Ethereum MCP Server"""
    # stdout carries the stdio transport
    print("Starting Ethereum MCP Server...", file=sys.stderr)
    asyncio.run(run_server())

if __name__ == "__main__":
    main()
