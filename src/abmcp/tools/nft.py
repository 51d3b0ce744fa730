"""NFT tools: ERC-721 mint and LayerZero ONFT bridge.

Both are registered only when ``[tools] nft_enabled`` is set.
"""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Any

from pydantic import Field

from abmcp.chain.abi import ERC721_MINT_ABI, ONFT_ABI
from abmcp.chain.address import ZERO_ADDRESS
from abmcp.config.schema import HEX_ADDRESS_PATTERN
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
    from abmcp.tools.base import ToolContext

_TOKEN_ID_PATTERN = r"^[0-9]+$"


# ── Mint ─────────────────────────────────────────────────────────


class MintNftParams(ToolParams):
    contract_address: str = Field(
        alias="contractAddress",
        pattern=HEX_ADDRESS_PATTERN,
        description="ERC-721 contract address exposing mint(address,uint256).",
    )
    to: str = Field(min_length=1, description="Recipient address or ENS name.")
    token_id: str | None = Field(
        default=None,
        alias="tokenId",
        pattern=_TOKEN_ID_PATTERN,
        description="Token ID. Defaults to the current epoch milliseconds.",
    )


class MintNftTool:
    """Mint an ERC-721 token from an existing collection.

    Implements the :class:`Tool` protocol.
    """

    def __init__(self, chain: ChainClient, resolver: AddressResolver) -> None:
        self._chain = chain
        self._resolver = resolver

    @property
    def name(self) -> str:
        return "ab_mint_nft"

    @property
    def description(self) -> str:
        return (
            "Mint a new ERC-721 token from an existing contract that exposes "
            "mint(address,uint256). The token ID defaults to epoch milliseconds."
        )

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return params_schema(MintNftParams)

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Mint NFT", destructive=True)

    async def execute(self, context: ToolContext, **kwargs: Any) -> str:
        params = parse_params(MintNftParams, kwargs)
        require_signer(self._chain)
        contract = await require_address(
            self._resolver, params.contract_address, role="contract"
        )
        recipient = await require_address(self._resolver, params.to, role="recipient")
        token_id = int(params.token_id) if params.token_id else time.time_ns() // 1_000_000

        context.log.info("Minting NFT", contract=contract, to=recipient, token_id=token_id)
        tx_hash = await self._chain.write_contract(
            contract, ERC721_MINT_ABI, "mint", [recipient, token_id]
        )
        context.log.info("NFT mint submitted", hash=tx_hash)
        return json.dumps({"hash": tx_hash, "to": recipient, "tokenId": str(token_id)})


# ── Bridge ───────────────────────────────────────────────────────


class BridgeNftParams(ToolParams):
    src_contract: str = Field(
        alias="srcContract",
        pattern=HEX_ADDRESS_PATTERN,
        description="ONFT contract address on the source chain.",
    )
    dst_chain_id: int = Field(
        alias="dstChainId",
        ge=0,
        le=65535,
        description="Destination LayerZero chain ID.",
    )
    token_id: str = Field(
        alias="tokenId",
        pattern=_TOKEN_ID_PATTERN,
        description="Token ID to bridge.",
    )
    to: str | None = Field(
        default=None,
        min_length=1,
        description="Destination address or ENS name. Defaults to the sender.",
    )


class BridgeNftTool:
    """Bridge an ONFT to another LayerZero chain with ``sendFrom``.

    Fees must be prepaid; the call is sent with value 0.

    Implements the :class:`Tool` protocol.
    """

    def __init__(self, chain: ChainClient, resolver: AddressResolver) -> None:
        self._chain = chain
        self._resolver = resolver

    @property
    def name(self) -> str:
        return "ab_bridge_nft"

    @property
    def description(self) -> str:
        return (
            "Bridge an existing ONFT (LayerZero-enabled NFT) from Abstract to "
            "another LayerZero chain ID. The destination defaults to the sender."
        )

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return params_schema(BridgeNftParams)

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Bridge NFT", destructive=True)

    async def execute(self, context: ToolContext, **kwargs: Any) -> str:
        params = parse_params(BridgeNftParams, kwargs)
        sender = require_signer(self._chain)
        contract = await require_address(
            self._resolver, params.src_contract, role="source contract"
        )
        destination = await require_address(
            self._resolver, params.to or sender, role="destination"
        )
        token_id = int(params.token_id)

        context.log.info(
            "Bridging NFT", token_id=token_id, dst_chain=params.dst_chain_id
        )
        tx_hash = await self._chain.write_contract(
            contract,
            ONFT_ABI,
            "sendFrom",
            [
                sender,
                params.dst_chain_id,
                bytes.fromhex(destination.removeprefix("0x")),
                token_id,
                sender,
                ZERO_ADDRESS,
                b"",
            ],
            value=0,
        )
        context.log.info("Bridge submitted", hash=tx_hash)
        return json.dumps(
            {
                "hash": tx_hash,
                "dstChainId": params.dst_chain_id,
                "tokenId": params.token_id,
                "to": destination,
            }
        )
