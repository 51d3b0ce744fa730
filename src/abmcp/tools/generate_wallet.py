"""EOA generation tool. Purely local; no chain access."""

from __future__ import annotations

import json
import secrets
from typing import TYPE_CHECKING, Any

from eth_account import Account
from web3 import Web3

from abmcp.tools.base import ToolAnnotations
from abmcp.tools.common import ToolParams, params_schema, parse_params

if TYPE_CHECKING:
    from abmcp.tools.base import ToolContext


class GenerateWalletParams(ToolParams):
    pass


def generate_wallet() -> dict[str, str]:
    """Fresh key pair from 32 bytes of OS randomness."""
    key = secrets.token_bytes(32)
    account = Account.from_key(key)
    return {"privateKey": Web3.to_hex(key), "address": account.address}


class GenerateWalletTool:
    """Generate a new externally owned account.

    Implements the :class:`Tool` protocol.
    """

    @property
    def name(self) -> str:
        return "ab_generate_wallet"

    @property
    def description(self) -> str:
        return (
            "Generate a new Abstract-compatible EOA key pair. Returns the "
            "private key and address. Store the key securely; it is shown once."
        )

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return params_schema(GenerateWalletParams)

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Generate EOA Wallet")

    async def execute(self, context: ToolContext, **kwargs: Any) -> str:
        parse_params(GenerateWalletParams, kwargs)
        wallet = generate_wallet()
        context.log.info("Generated wallet", address=wallet["address"])
        return json.dumps(wallet)
