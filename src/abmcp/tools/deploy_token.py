"""ERC-20 deployment tool.

Hands the token parameters to the configured :class:`TokenDeployer`
(by default the ``deployBasicToken.js`` subprocess) and reports the
contract address.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import Field

from abmcp.chain.amounts import format_units
from abmcp.core.errors import AbmcpError, ExternalCallError
from abmcp.deploy.base import TokenDeployParams
from abmcp.tools.base import ToolAnnotations
from abmcp.tools.common import ToolParams, params_schema, parse_params

if TYPE_CHECKING:
    from abmcp.deploy.base import TokenDeployer
    from abmcp.tools.base import ToolContext


class DeployTokenParams(ToolParams):
    name: str = Field(min_length=1, description="Token name, e.g. 'DemoToken'.")
    symbol: str = Field(min_length=1, description="Token symbol / ticker, e.g. 'DMT'.")
    initial_supply: str = Field(
        alias="initialSupply",
        pattern=r"^[0-9]+$",
        description=(
            "Initial supply in base units (wei), e.g. "
            "1000000000000000000000 for 1000 tokens at 18 decimals."
        ),
    )
    debug: bool = Field(
        default=False,
        description="Return verbose error information instead of failing.",
    )


class DeployTokenTool:
    """Deploy a BasicToken ERC-20 contract.

    Implements the :class:`Tool` protocol.
    """

    def __init__(self, deployer: TokenDeployer, *, decimals: int = 18) -> None:
        self._deployer = deployer
        self._decimals = decimals

    @property
    def name(self) -> str:
        return "ab_deploy_token_erc20"

    @property
    def description(self) -> str:
        return (
            "Deploy an ERC-20 BasicToken to the Abstract network. initialSupply "
            "is a numeric string in base units. The server wallet pays for "
            "deployment and must hold enough ETH."
        )

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return params_schema(DeployTokenParams)

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Contract Deployment Tool", destructive=True)

    async def execute(self, context: ToolContext, **kwargs: Any) -> str:
        params = parse_params(DeployTokenParams, kwargs)
        context.log.info(
            "Starting ERC-20 deployment", name=params.name, symbol=params.symbol
        )
        try:
            address = await self._deployer.deploy(
                TokenDeployParams(
                    name=params.name,
                    symbol=params.symbol,
                    initial_supply=params.initial_supply,
                )
            )
        except AbmcpError as e:
            if not params.debug:
                raise
            context.log.error("Deployment failed", kind=type(e).__name__, error=e)
            return json.dumps(_failure_payload(e))

        context.log.info("Deployment completed", address=address)
        return json.dumps(
            {
                "address": address,
                "name": params.name,
                "symbol": params.symbol,
                "initialSupply": params.initial_supply,
                "totalSupply": format_units(int(params.initial_supply), self._decimals),
                "decimals": self._decimals,
            }
        )


def _failure_payload(error: AbmcpError) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "success": False,
        "errorKind": type(error).__name__,
        "error": str(error),
    }
    if isinstance(error, ExternalCallError):
        payload["failureKind"] = error.kind.value
        payload["detail"] = error.detail
    return payload
