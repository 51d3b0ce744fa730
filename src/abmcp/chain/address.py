"""Address resolution: raw hex passthrough or ENS-like name lookup."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, NewType

from abmcp.core.errors import AbmcpError

if TYPE_CHECKING:
    from abmcp.chain.client import ChainClient

logger = logging.getLogger(__name__)

ResolvedAddress = NewType("ResolvedAddress", str)
"""A validated 20-byte hex address. Only :class:`AddressResolver` makes these."""

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

_HEX_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_address(value: str) -> bool:
    """Check if value is a 20-byte hex address (checksum-agnostic)."""
    return bool(_HEX_ADDRESS_RE.fullmatch(value))


def is_zero_address(value: str) -> bool:
    return value.lower() == ZERO_ADDRESS


class AddressResolver:
    """Turns user-supplied identifiers into :data:`ResolvedAddress` values.

    Hex addresses come back unchanged without touching the network.
    Anything else gets exactly one name lookup through the chain
    client.  A failed or empty lookup is an expected outcome and
    yields ``None`` rather than an exception.
    """

    def __init__(self, chain: ChainClient) -> None:
        self._chain = chain

    async def resolve(self, identifier: str) -> ResolvedAddress | None:
        candidate = identifier.strip()
        if is_address(candidate):
            return ResolvedAddress(candidate)
        if not candidate:
            return None

        try:
            found = await self._chain.get_ens_address(candidate)
        except AbmcpError as exc:
            logger.debug("Name lookup failed for %s: %s", candidate, exc)
            return None

        if not found or not is_address(found) or is_zero_address(found):
            logger.debug("No address record for %s", candidate)
            return None
        return ResolvedAddress(found)
