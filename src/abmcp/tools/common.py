"""Helpers shared by the tool handlers.

Parameter parsing, address and token resolution, and decimals
selection.  Every handler runs validate -> resolve -> normalize ->
invoke; the first three steps live here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, model_validator

from abmcp.chain.abi import ERC20_ABI
from abmcp.chain.address import is_zero_address
from abmcp.chain.amounts import DEFAULT_DECIMALS
from abmcp.config.schema import HEX_ADDRESS_PATTERN
from abmcp.core.errors import (
    AbmcpError,
    ConfigError,
    ResolutionError,
    UnknownSymbolError,
    ValidationError,
)

if TYPE_CHECKING:
    from abmcp.chain.address import AddressResolver, ResolvedAddress
    from abmcp.chain.client import ChainClient
    from abmcp.chain.tokens import TokenRegistry
    from abmcp.tools.base import ToolLogger

P = TypeVar("P", bound=BaseModel)


# ── Parameters ───────────────────────────────────────────────────


class ToolParams(BaseModel):
    """Base for tool parameter models. Wire names are camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True)


class TokenSelection(ToolParams):
    """Optional token selector: by contract address or registry symbol."""

    token_address: str | None = Field(
        default=None,
        alias="tokenAddress",
        pattern=HEX_ADDRESS_PATTERN,
        description="ERC-20 token contract address. Omit for native ETH.",
    )
    token_symbol: str | None = Field(
        default=None,
        alias="tokenSymbol",
        min_length=1,
        description="Token symbol from the registry, e.g. 'ETH'.",
    )

    @model_validator(mode="after")
    def _one_selector(self) -> TokenSelection:
        if self.token_address and self.token_symbol:
            msg = "Provide either tokenAddress or tokenSymbol, not both"
            raise ValueError(msg)
        return self


def _describe(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        text = err["msg"].removeprefix("Value error, ")
        parts.append(f"{loc}: {text}" if loc else text)
    return "; ".join(parts)


def parse_params(model: type[P], arguments: dict[str, Any]) -> P:
    """Validate raw tool arguments against ``model``.

    Raises:
        ValidationError: With every field problem in one message.
    """
    try:
        return model.model_validate(arguments)
    except pydantic.ValidationError as e:
        msg = f"Invalid parameters: {_describe(e)}"
        raise ValidationError(msg) from e


def params_schema(model: type[BaseModel]) -> dict[str, Any]:
    """JSON Schema for a parameter model, keyed by wire names."""
    return model.model_json_schema(by_alias=True)


# ── Resolution ───────────────────────────────────────────────────


async def require_address(
    resolver: AddressResolver, identifier: str, *, role: str
) -> ResolvedAddress:
    """Resolve ``identifier`` or raise :class:`ResolutionError`."""
    resolved = await resolver.resolve(identifier)
    if resolved is None:
        raise ResolutionError(identifier, role=role)
    return resolved


def require_signer(chain: ChainClient) -> str:
    """Address of the server wallet, which must be configured."""
    signer = chain.signer_address
    if signer is None:
        msg = "ABSTRACT_PRIVATE_KEY env variable is required for this operation"
        raise ConfigError(msg)
    return signer


@dataclass(frozen=True, slots=True)
class TokenTarget:
    """A resolved token with the decimals to use for amounts."""

    address: ResolvedAddress
    decimals: int
    symbol: str | None = None

    @property
    def is_native(self) -> bool:
        return is_zero_address(self.address)


async def fetch_decimals(
    chain: ChainClient, address: ResolvedAddress, log: ToolLogger
) -> int:
    """On-chain ``decimals()`` with a logged fallback to the default."""
    try:
        value = int(await chain.read_contract(address, ERC20_ABI, "decimals"))
    except (AbmcpError, TypeError, ValueError) as e:
        log.warn("decimals() lookup failed", token=address, error=e)
    else:
        if 0 <= value <= 255:
            return value
        log.warn("decimals() returned an out-of-range value", token=address, value=value)

    log.warn(
        "Using default decimals for token",
        token=address,
        decimals=DEFAULT_DECIMALS,
    )
    return DEFAULT_DECIMALS


async def select_token(
    params: TokenSelection,
    *,
    tokens: TokenRegistry,
    resolver: AddressResolver,
    chain: ChainClient,
    log: ToolLogger,
) -> TokenTarget | None:
    """Resolve the token a call refers to, or None for native ETH.

    Decimals come from the registry when the token is known, otherwise
    from the token contract, otherwise the default.
    """
    if params.token_symbol:
        info = tokens.lookup(params.token_symbol)
        if info is None:
            raise UnknownSymbolError(params.token_symbol)
        address = await require_address(resolver, info.address, role="token")
        return TokenTarget(address=address, decimals=info.decimals, symbol=info.symbol)

    if params.token_address:
        address = await require_address(resolver, params.token_address, role="token")
        known = tokens.by_address(address)
        if known is not None:
            return TokenTarget(
                address=address, decimals=known.decimals, symbol=known.symbol
            )
        if is_zero_address(address):
            return TokenTarget(address=address, decimals=DEFAULT_DECIMALS)
        decimals = await fetch_decimals(chain, address, log)
        return TokenTarget(address=address, decimals=decimals)

    return None
