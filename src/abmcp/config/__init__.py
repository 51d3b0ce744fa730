"""Configuration loading and validation."""

from abmcp.config.loader import load_config, normalize_private_key
from abmcp.config.schema import (
    AbmcpConfig,
    ChainConfig,
    DeployConfig,
    LoggingConfig,
    SmartAccountConfig,
    TokenEntry,
    ToolsConfig,
)

__all__ = [
    "AbmcpConfig",
    "ChainConfig",
    "DeployConfig",
    "LoggingConfig",
    "SmartAccountConfig",
    "TokenEntry",
    "ToolsConfig",
    "load_config",
    "normalize_private_key",
]
