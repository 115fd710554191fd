"""Error classes for the Ethereum MCP server."""


class EthereumMCPError(Exception):
    """Base error for all server operations."""

    pass


class InputError(EthereumMCPError):
    """Malformed or unsupported request input, raised before any network call."""

    pass


class ConversionError(EthereumMCPError):
    """Amount cannot be converted between decimal and on-chain units."""

    pass


class TokenResolutionError(EthereumMCPError):
    """Token metadata could not be fetched."""

    pass


class NoRouteError(EthereumMCPError):
    """No venue produced a quote for the requested pair."""

    pass


class TransactionError(EthereumMCPError):
    """Transaction could not be built, estimated or signed."""

    pass


class RPCError(EthereumMCPError):
    """Node request failed (transport, timeout, malformed response)."""

    pass


class ContractRevertError(RPCError):
    """A contract call reverted.

    Quoting calls revert when a route has no liquidity, so venues treat this
    as "no quote" instead of a hard failure.
    """

    pass
