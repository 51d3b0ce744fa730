"""ERC-20 deployment through an external script.

Runs the configured deployment command (by default the zksync-ethers
``deployBasicToken.js`` script under node) with the token parameters in
its environment, then reads the contract address from stdout.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from typing import TYPE_CHECKING

from abmcp.core.errors import ConfigError, FailureKind, ParseError
from abmcp.core.failures import external_call_error

if TYPE_CHECKING:
    from abmcp.config.schema import DeployConfig
    from abmcp.deploy.base import TokenDeployParams

logger = logging.getLogger(__name__)

_OPERATION = "deployToken"


class SubprocessTokenDeployer:
    """Token deployer that shells out to a deployment script.

    Implements the :class:`TokenDeployer` protocol.
    """

    def __init__(
        self,
        config: DeployConfig,
        *,
        rpc_url: str,
        private_key: str | None,
        private_key_env: str = "ABSTRACT_PRIVATE_KEY",
    ) -> None:
        self._config = config
        self._rpc_url = rpc_url
        self._private_key = private_key
        self._private_key_env = private_key_env
        self._address_re = re.compile(
            rf"{re.escape(config.contract_name)} deployed at:\s*(0x[0-9a-fA-F]{{40}})",
            re.IGNORECASE,
        )

    def _environment(self, params: TokenDeployParams) -> dict[str, str]:
        """Process environment with the deployment variables layered on top."""
        if not self._rpc_url:
            msg = "RPC_URL or ABSTRACT_RPC_URL environment variable is required"
            raise ConfigError(msg)
        if not self._private_key:
            msg = f"PRIVATE_KEY or {self._private_key_env} environment variable is required"
            raise ConfigError(msg)
        env = dict(os.environ)
        env.update(
            {
                "ABSTRACT_RPC_URL": self._rpc_url,
                "ABSTRACT_PRIVATE_KEY": self._private_key,
                "TOKEN_NAME": params.name,
                "TOKEN_SYMBOL": params.symbol,
                "TOKEN_SUPPLY": params.initial_supply,
            }
        )
        return env

    async def deploy(self, params: TokenDeployParams) -> str:
        """Run the deployment script once and return the contract address."""
        command = self._config.command
        if not command:
            msg = "deploy.command must be set to deploy tokens"
            raise ConfigError(msg)
        env = self._environment(params)
        logger.info(
            "Starting %s deployment name=%s symbol=%s command=%s",
            self._config.contract_name,
            params.name,
            params.symbol,
            " ".join(command),
        )

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except OSError as e:
            raise external_call_error(
                e, operation=_OPERATION, kind=FailureKind.PROCESS_EXIT
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(),
                timeout=self._config.timeout,
            )
        except TimeoutError as e:
            proc.kill()
            await proc.communicate()
            raise external_call_error(
                f"Deployment timed out after {self._config.timeout} seconds",
                operation=_OPERATION,
                kind=FailureKind.TIMEOUT,
            ) from e

        out = stdout.decode(errors="replace").strip()
        err = stderr.decode(errors="replace").strip()

        if proc.returncode != 0:
            detail = "\n".join(part for part in (err, out) if part) or "Deployment failed"
            logger.error(
                "Token deployment exited code=%s symbol=%s", proc.returncode, params.symbol
            )
            raise external_call_error(
                detail, operation=_OPERATION, kind=FailureKind.PROCESS_EXIT
            )

        return self._parse_address(out)

    def _parse_address(self, output: str) -> str:
        """Extract the deployed address from the script's stdout."""
        match = self._address_re.search(output)
        if match is None:
            msg = "Failed to parse deployed token address from output"
            logger.error("%s output=%r", msg, output[-500:])
            raise ParseError(msg)
        address = match.group(1)
        logger.info("%s deployed at %s", self._config.contract_name, address)
        return address
