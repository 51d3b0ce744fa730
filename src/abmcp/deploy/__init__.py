"""Deployment backends for tokens and smart accounts."""

from abmcp.deploy.base import (
    SmartAccountDeployer,
    SmartAccountDeployment,
    TokenDeployer,
    TokenDeployParams,
)
from abmcp.deploy.process import SubprocessTokenDeployer
from abmcp.deploy.smart_account import FactorySmartAccountDeployer

__all__ = [
    "FactorySmartAccountDeployer",
    "SmartAccountDeployer",
    "SmartAccountDeployment",
    "SubprocessTokenDeployer",
    "TokenDeployParams",
    "TokenDeployer",
]
