"""Transfer tool: send native ETH or an ERC-20 token."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import Field

from abmcp.chain.abi import ERC20_ABI
from abmcp.chain.amounts import DEFAULT_DECIMALS, parse_units
from abmcp.tools.base import ToolAnnotations
from abmcp.tools.common import (
    TokenSelection,
    params_schema,
    parse_params,
    require_address,
    require_signer,
    select_token,
)

if TYPE_CHECKING:
    from abmcp.chain.address import AddressResolver
    from abmcp.chain.client import ChainClient
    from abmcp.chain.tokens import TokenRegistry
    from abmcp.tools.base import ToolContext


class TransferTokenParams(TokenSelection):
    to: str = Field(min_length=1, description="Recipient address or ENS name.")
    amount: str = Field(
        pattern=r"^\s*(?:[0-9]+\.?[0-9]*|\.[0-9]+)\s*$",
        description="Amount in human units, e.g. '0.5'.",
    )


class TransferTokenTool:
    """Transfer ETH or tokens from the server wallet.

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
        return "ab_transfer_token"

    @property
    def description(self) -> str:
        return (
            "Transfer ETH, or an ERC-20 token when tokenAddress or tokenSymbol "
            "is given, from the server wallet to an address or ENS name."
        )

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return params_schema(TransferTokenParams)

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Transfer Token", destructive=True)

    async def execute(self, context: ToolContext, **kwargs: Any) -> str:
        params = parse_params(TransferTokenParams, kwargs)
        sender = require_signer(self._chain)
        recipient = await require_address(self._resolver, params.to, role="recipient")
        token = await select_token(
            params,
            tokens=self._tokens,
            resolver=self._resolver,
            chain=self._chain,
            log=context.log,
        )

        payload: dict[str, Any] = {
            "from": sender,
            "to": recipient,
            "amount": params.amount,
        }
        if token is None or token.is_native:
            value = parse_units(params.amount, DEFAULT_DECIMALS)
            tx_hash = await self._chain.send_transaction(recipient, value)
            payload["token"] = "ETH"
        else:
            units = parse_units(params.amount, token.decimals)
            tx_hash = await self._chain.write_contract(
                token.address, ERC20_ABI, "transfer", [recipient, units]
            )
            payload["token"] = token.address
            if token.symbol:
                payload["symbol"] = token.symbol

        context.log.info(
            "Transfer submitted",
            to=recipient,
            amount=params.amount,
            token=payload["token"],
            hash=tx_hash,
        )
        return json.dumps({"hash": tx_hash, **payload})
