"""Process-wide wiring of abmcp's collaborators.

Everything a tool needs is built once here and passed in explicitly.
Tests swap in fakes through the keyword arguments of
:func:`build_runtime`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from abmcp.chain.address import AddressResolver
from abmcp.chain.client import Web3ChainClient
from abmcp.chain.networks import get_network
from abmcp.chain.tokens import TokenRegistry
from abmcp.deploy.process import SubprocessTokenDeployer
from abmcp.deploy.smart_account import FactorySmartAccountDeployer
from abmcp.tools.create_wallet import CreateWalletTool
from abmcp.tools.deploy_token import DeployTokenTool
from abmcp.tools.generate_wallet import GenerateWalletTool
from abmcp.tools.get_balance import GetBalanceTool
from abmcp.tools.registry import ToolRegistry
from abmcp.tools.transfer_token import TransferTokenTool

if TYPE_CHECKING:
    from abmcp.chain.client import ChainClient
    from abmcp.config.schema import AbmcpConfig
    from abmcp.deploy.base import SmartAccountDeployer, TokenDeployer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Runtime:
    """The assembled collaborators for one abmcp process."""

    config: AbmcpConfig
    chain: ChainClient
    tokens: TokenRegistry
    resolver: AddressResolver
    registry: ToolRegistry


def build_runtime(
    config: AbmcpConfig,
    *,
    chain: ChainClient | None = None,
    token_deployer: TokenDeployer | None = None,
    account_deployer: SmartAccountDeployer | None = None,
) -> Runtime:
    """Construct the chain client, registries, backends, and tools."""
    if chain is None:
        chain = Web3ChainClient.from_config(config.chain)
    tokens = TokenRegistry.from_entries(config.tokens)
    resolver = AddressResolver(chain)

    if token_deployer is None:
        token_deployer = SubprocessTokenDeployer(
            config.deploy,
            rpc_url=config.chain.rpc_url or get_network(config.chain.network).rpc_url,
            private_key=config.chain.private_key,
            private_key_env=config.chain.private_key_env,
        )
    if account_deployer is None:
        account_deployer = FactorySmartAccountDeployer(
            chain, resolver, config.smart_account
        )

    registry = ToolRegistry()
    registry.register(GetBalanceTool(chain, resolver, tokens))
    registry.register(TransferTokenTool(chain, resolver, tokens))
    registry.register(DeployTokenTool(token_deployer, decimals=config.deploy.decimals))
    registry.register(CreateWalletTool(chain, resolver, account_deployer))
    registry.register(GenerateWalletTool())

    # NFT tools (only if explicitly enabled)
    if config.tools.nft_enabled:
        from abmcp.tools.nft import BridgeNftTool, MintNftTool

        registry.register(MintNftTool(chain, resolver))
        registry.register(BridgeNftTool(chain, resolver))

    logger.debug("Registered tools: %s", ", ".join(registry.list_names()))
    return Runtime(
        config=config,
        chain=chain,
        tokens=tokens,
        resolver=resolver,
        registry=registry,
    )
