"""Deployment backend protocols and data types.

Tools only see these narrow interfaces, so whether a deployment runs
in-process or in a subprocess is a wiring decision.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from abmcp.chain.address import ResolvedAddress


@dataclass(frozen=True, slots=True)
class TokenDeployParams:
    """Constructor arguments for an ERC-20 deployment."""

    name: str
    symbol: str
    initial_supply: str  # base units, decimal digits only


@dataclass(frozen=True, slots=True)
class SmartAccountDeployment:
    """Outcome of a smart-account deployment."""

    address: str
    transaction_hash: str | None = None  # None when the account already existed


@runtime_checkable
class TokenDeployer(Protocol):
    """Deploys an ERC-20 token contract."""

    async def deploy(self, params: TokenDeployParams) -> str:
        """Deploy the token and return its contract address.

        Raises:
            ExternalCallError: If the deployment fails.
            ParseError: If the deployment succeeded but no address
                could be read from its output.
        """
        ...


@runtime_checkable
class SmartAccountDeployer(Protocol):
    """Deploys a smart-contract account for an initial signer."""

    async def deploy_account(
        self, initial_signer: ResolvedAddress
    ) -> SmartAccountDeployment:
        """Deploy (or locate) the account owned by ``initial_signer``."""
        ...
