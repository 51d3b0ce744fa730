"""Static registry of well-known tokens.

The registry is process-wide configuration: the built-in list plus any
``[[tokens]]`` entries from the config file.  It is built once and
never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from abmcp.chain.address import ZERO_ADDRESS, is_address, is_zero_address
from abmcp.core.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from abmcp.config.schema import TokenEntry


@dataclass(frozen=True, slots=True)
class TokenInfo:
    """Symbol, contract address and decimals of a token."""

    symbol: str
    address: str
    decimals: int

    def __post_init__(self) -> None:
        if not self.symbol:
            msg = "Token symbol must be non-empty"
            raise ValueError(msg)
        if not is_address(self.address):
            msg = f"Invalid token address for {self.symbol}: {self.address}"
            raise ValueError(msg)
        if not 0 <= self.decimals <= 255:
            msg = f"Token decimals out of range for {self.symbol}: {self.decimals}"
            raise ValueError(msg)

    @property
    def is_native(self) -> bool:
        """True for the chain's native asset (the zero address)."""
        return is_zero_address(self.address)


NATIVE_ETH = TokenInfo(symbol="ETH", address=ZERO_ADDRESS, decimals=18)

DEFAULT_TOKENS: tuple[TokenInfo, ...] = (NATIVE_ETH,)


class TokenRegistry:
    """Case-insensitive symbol lookup over a fixed token list."""

    def __init__(self, tokens: Iterable[TokenInfo] = DEFAULT_TOKENS) -> None:
        by_symbol: dict[str, TokenInfo] = {}
        for token in tokens:
            key = token.symbol.lower()
            if key in by_symbol:
                msg = f"Duplicate token symbol in registry: {token.symbol}"
                raise ConfigError(msg)
            by_symbol[key] = token
        self._by_symbol = by_symbol
        self._by_address = {t.address.lower(): t for t in by_symbol.values()}

    @classmethod
    def from_entries(cls, entries: Iterable[TokenEntry]) -> TokenRegistry:
        """Build the default registry extended with configured entries."""
        extra = [
            TokenInfo(symbol=e.symbol, address=e.address, decimals=e.decimals)
            for e in entries
        ]
        return cls([*DEFAULT_TOKENS, *extra])

    def lookup(self, symbol: str) -> TokenInfo | None:
        """Return the token for ``symbol`` (any case), or None."""
        return self._by_symbol.get(symbol.strip().lower())

    def by_address(self, address: str) -> TokenInfo | None:
        """Return the token deployed at ``address``, or None."""
        return self._by_address.get(address.strip().lower())

    def symbols(self) -> list[str]:
        return [t.symbol for t in self._by_symbol.values()]

    def __iter__(self) -> Iterator[TokenInfo]:
        return iter(self._by_symbol.values())

    def __len__(self) -> int:
        return len(self._by_symbol)

    def __contains__(self, symbol: str) -> bool:
        return self.lookup(symbol) is not None
