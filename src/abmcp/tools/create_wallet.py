"""Abstract Global Wallet deployment tool."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import Field

from abmcp.tools.base import ToolAnnotations
from abmcp.tools.common import (
    ToolParams,
    params_schema,
    parse_params,
    require_address,
    require_signer,
)

if TYPE_CHECKING:
    from abmcp.chain.address import AddressResolver
    from abmcp.chain.client import ChainClient
    from abmcp.deploy.base import SmartAccountDeployer
    from abmcp.tools.base import ToolContext


class CreateWalletParams(ToolParams):
    signer: str | None = Field(
        default=None,
        min_length=1,
        description=(
            "EOA signer address or ENS name. Defaults to the server wallet's "
            "account."
        ),
    )


class CreateWalletTool:
    """Deploy a smart-contract account for an initial signer.

    Implements the :class:`Tool` protocol.
    """

    def __init__(
        self,
        chain: ChainClient,
        resolver: AddressResolver,
        deployer: SmartAccountDeployer,
    ) -> None:
        self._chain = chain
        self._resolver = resolver
        self._deployer = deployer

    @property
    def name(self) -> str:
        return "ab_agw_create_wallet"

    @property
    def description(self) -> str:
        return (
            "Deploy a new Abstract Global Wallet (smart-contract account) for a "
            "signer. Returns the account address and the deployment transaction "
            "hash, which is null when the account already exists."
        )

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return params_schema(CreateWalletParams)

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="AGW • Deploy Smart Account", destructive=True)

    async def execute(self, context: ToolContext, **kwargs: Any) -> str:
        params = parse_params(CreateWalletParams, kwargs)
        identifier = params.signer or require_signer(self._chain)
        signer = await require_address(self._resolver, identifier, role="signer")

        context.log.info("Deploying AGW smart account", signer=signer)
        deployment = await self._deployer.deploy_account(signer)
        context.log.info(
            "Smart account ready",
            address=deployment.address,
            tx=deployment.transaction_hash or "none",
        )
        return json.dumps(
            {
                "smartAccountAddress": deployment.address,
                "deploymentTransaction": deployment.transaction_hash,
                "signer": signer,
            }
        )
