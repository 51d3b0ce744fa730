"""Pydantic models for abmcp configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

HEX_ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"


class ChainConfig(BaseModel):
    """Target network, RPC endpoint, and signer key."""

    network: Literal["testnet", "mainnet"] = "testnet"
    rpc_url: str | None = None
    rpc_url_env: str = "ABSTRACT_RPC_URL"
    private_key: str | None = Field(default=None, repr=False)
    private_key_env: str = "ABSTRACT_PRIVATE_KEY"


class TokenEntry(BaseModel):
    """A known token added to the built-in registry."""

    symbol: str = Field(min_length=1)
    address: str = Field(pattern=HEX_ADDRESS_PATTERN)
    decimals: int = Field(default=18, ge=0, le=255)


class DeployConfig(BaseModel):
    """ERC-20 deployment subprocess settings.

    abmcp does not ship a deployment script.  ``command`` must point at
    one, e.g. ``["node", "dist/constants/deployBasicToken.js"]`` from a
    built Abstract token project.
    """

    command: list[str] = Field(default_factory=list)
    contract_name: str = "BasicToken"
    timeout: int = 300
    decimals: int = Field(default=18, ge=0, le=255)


class SmartAccountConfig(BaseModel):
    """Abstract Global Wallet factory settings."""

    factory_address: str | None = Field(default=None, pattern=HEX_ADDRESS_PATTERN)
    validator_address: str | None = Field(default=None, pattern=HEX_ADDRESS_PATTERN)


class ToolsConfig(BaseModel):
    """Optional tool toggles."""

    nft_enabled: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    structured: bool = False


class AbmcpConfig(BaseModel):
    """Top-level configuration for abmcp."""

    chain: ChainConfig = Field(default_factory=ChainConfig)
    tokens: list[TokenEntry] = Field(default_factory=list)
    deploy: DeployConfig = Field(default_factory=DeployConfig)
    smart_account: SmartAccountConfig = Field(default_factory=SmartAccountConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
