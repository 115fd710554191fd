"""RPC endpoint discovery: probe public providers and pick one that answers."""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional

import httpx

logger = logging.getLogger(__name__)

PROBE_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class RpcProvider:
    """A public Ethereum JSON-RPC endpoint."""
    url: str
    name: str
    description: str
    rate_limit: Optional[int] = None  # requests per minute


RECOMMENDED_PROVIDERS = [
    RpcProvider("https://eth.llamarpc.com", "LlamaRPC", "Fast and stable, recommended", 1000),
    RpcProvider("https://rpc.ankr.com/eth", "Ankr", "Multi-chain, reliable", 500),
    RpcProvider("https://ethereum.publicnode.com", "PublicNode", "Free, no rate limit"),
    RpcProvider("https://cloudflare-eth.com", "Cloudflare", "Operated by Cloudflare", 1000),
]


def get_recommended_providers() -> List[RpcProvider]:
    return list(RECOMMENDED_PROVIDERS)


async def probe_rpc_connection(
    rpc_url: str,
    timeout: float = PROBE_TIMEOUT_SECONDS,
    http_client: Optional[httpx.AsyncClient] = None,
) -> bool:
    """Return True if the endpoint answers eth_chainId within the timeout."""
    payload = {"jsonrpc": "2.0", "id": 1, "method": "eth_chainId", "params": []}
    client = http_client or httpx.AsyncClient(timeout=timeout)
    try:
        response = await client.post(rpc_url, json=payload, timeout=timeout)
        body = response.json() if response.status_code == 200 else None
        if isinstance(body, dict) and "result" in body:
            logger.info(f"RPC connection OK: {rpc_url}")
            return True
        logger.warning(f"RPC connection failed: {rpc_url} ({response.status_code})")
        return False
    except httpx.TimeoutException:
        logger.warning(f"RPC connection timed out: {rpc_url}")
        return False
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"RPC connection failed: {rpc_url} ({e})")
        return False
    finally:
        if http_client is None:
            await client.aclose()


async def auto_select_rpc(
    providers: Optional[List[RpcProvider]] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> str:
    """First provider, in order of preference, that answers the probe."""
    logger.info("Selecting an available RPC provider...")

    for provider in providers or get_recommended_providers():
        logger.info(f"Testing RPC: {provider.name} ({provider.url})")
        if await probe_rpc_connection(provider.url, http_client=http_client):
            logger.info(f"Selected RPC: {provider.name} - {provider.description}")
            return provider.url

    raise ConnectionError("No RPC provider is reachable")


async def get_best_rpc_url(
    providers: Optional[List[RpcProvider]] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> str:
    """ETHEREUM_RPC_URL if it answers, otherwise an auto-selected provider."""
    env_rpc = os.getenv("ETHEREUM_RPC_URL")
    if env_rpc:
        logger.info(f"Using RPC from environment: {env_rpc}")
        if await probe_rpc_connection(env_rpc, http_client=http_client):
            return env_rpc
        logger.warning("RPC from environment is unavailable, falling back to auto-selection...")

    return await auto_select_rpc(providers, http_client=http_client)
