"""Balance tool: native ETH or ERC-20 balance of an address or name."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field

from abmcp.chain.abi import ERC20_ABI
from abmcp.chain.amounts import DEFAULT_DECIMALS, format_units
from abmcp.tools.base import ToolAnnotations
from abmcp.tools.common import (
    TokenSelection,
    params_schema,
    parse_params,
    require_address,
    select_token,
)

if TYPE_CHECKING:
    from abmcp.chain.address import AddressResolver
    from abmcp.chain.client import ChainClient
    from abmcp.chain.tokens import TokenRegistry
    from abmcp.tools.base import ToolContext


class GetBalanceParams(TokenSelection):
    address: str = Field(
        min_length=1,
        description="Wallet address or ENS name to check.",
    )


class GetBalanceTool:
    """Read a wallet balance in human units.

    Implements the :class:`Tool` protocol.
    """

    def __init__(
        self,
        chain: ChainClient,
        resolver: AddressResolver,
        tokens: TokenRegistry,
    ) -> None:
        self._chain = chain
        self._resolver = resolver
        self._tokens = tokens

    @property
    def name(self) -> str:
        return "ab_get_balance"

    @property
    def description(self) -> str:
        return (
            "Get the ETH balance, or an ERC-20 balance when tokenAddress or "
            "tokenSymbol is given, for an address or ENS name on Abstract."
        )

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return params_schema(GetBalanceParams)

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Get Balance", read_only=True)

    async def execute(self, context: ToolContext, **kwargs: Any) -> str:
        """Return the balance as a decimal string."""
        params = parse_params(GetBalanceParams, kwargs)
        owner = await require_address(self._resolver, params.address, role="owner")
        token = await select_token(
            params,
            tokens=self._tokens,
            resolver=self._resolver,
            chain=self._chain,
            log=context.log,
        )

        if token is None or token.is_native:
            wei = await self._chain.get_balance(owner)
            balance = format_units(wei, DEFAULT_DECIMALS)
            context.log.info("Native balance fetched", address=owner, balance=balance)
            return balance

        raw = await self._chain.read_contract(
            token.address, ERC20_ABI, "balanceOf", [owner]
        )
        balance = format_units(int(raw), token.decimals)
        context.log.info(
            "Token balance fetched",
            address=owner,
            token=token.address,
            balance=balance,
        )
        return balance
