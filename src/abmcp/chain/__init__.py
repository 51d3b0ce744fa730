"""Chain access: client capability, address/token resolution, amounts."""

from abmcp.chain.address import (
    ZERO_ADDRESS,
    AddressResolver,
    ResolvedAddress,
    is_address,
)
from abmcp.chain.amounts import DEFAULT_DECIMALS, format_units, parse_units
from abmcp.chain.client import ChainClient, Web3ChainClient
from abmcp.chain.tokens import NATIVE_ETH, TokenInfo, TokenRegistry

__all__ = [
    "DEFAULT_DECIMALS",
    "NATIVE_ETH",
    "ZERO_ADDRESS",
    "AddressResolver",
    "ChainClient",
    "ResolvedAddress",
    "TokenInfo",
    "TokenRegistry",
    "Web3ChainClient",
    "format_units",
    "is_address",
    "parse_units",
]
