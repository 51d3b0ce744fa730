"""Tests for the NFT mint and bridge tools."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from abmcp.chain.address import ZERO_ADDRESS, AddressResolver
from abmcp.core.errors import ConfigError, ResolutionError, ValidationError
from abmcp.tools.nft import BridgeNftTool, MintNftTool
from tests.fixtures.chain import ALICE, SIGNER, TOKEN, FakeChainClient

# ── Mint ─────────────────────────────────────────────────────────


class TestMintNft:
    async def test_mint_with_token_id(self, chain, resolver, context) -> None:
        result = json.loads(
            await MintNftTool(chain, resolver).execute(
                context, contractAddress=TOKEN, to=ALICE, tokenId="42"
            )
        )
        (write,) = chain.calls("write_contract")
        assert write["address"] == TOKEN
        assert write["function"] == "mint"
        assert write["args"] == [ALICE, 42]
        assert result["tokenId"] == "42"
        assert result["to"] == ALICE

    async def test_default_token_id_is_epoch_ms(self, chain, resolver, context) -> None:
        with patch("abmcp.tools.nft.time.time_ns", return_value=1_700_000_000_123_456_789):
            result = json.loads(
                await MintNftTool(chain, resolver).execute(
                    context, contractAddress=TOKEN, to=ALICE
                )
            )
        assert result["tokenId"] == "1700000000123"
        assert chain.calls("write_contract")[0]["args"][1] == 1_700_000_000_123

    async def test_ens_recipient(self, context) -> None:
        chain = FakeChainClient(ens={"alice.eth": ALICE})
        await MintNftTool(chain, AddressResolver(chain)).execute(
            context, contractAddress=TOKEN, to="alice.eth", tokenId="1"
        )
        assert chain.calls("write_contract")[0]["args"][0] == ALICE

    async def test_unresolvable_recipient(self, chain, resolver, context) -> None:
        with pytest.raises(ResolutionError, match="recipient"):
            await MintNftTool(chain, resolver).execute(
                context, contractAddress=TOKEN, to="nobody.eth"
            )
        assert chain.calls("write_contract") == []

    async def test_contract_must_be_hex(self, chain, resolver, context) -> None:
        with pytest.raises(ValidationError, match="contractAddress"):
            await MintNftTool(chain, resolver).execute(
                context, contractAddress="nft.eth", to=ALICE
            )

    async def test_token_id_digits_only(self, chain, resolver, context) -> None:
        with pytest.raises(ValidationError, match="tokenId"):
            await MintNftTool(chain, resolver).execute(
                context, contractAddress=TOKEN, to=ALICE, tokenId="-1"
            )


# ── Bridge ───────────────────────────────────────────────────────


class TestBridgeNft:
    async def test_bridge_defaults_to_sender(self, chain, resolver, context) -> None:
        result = json.loads(
            await BridgeNftTool(chain, resolver).execute(
                context, srcContract=TOKEN, dstChainId=101, tokenId="7"
            )
        )
        (write,) = chain.calls("write_contract")
        assert write["function"] == "sendFrom"
        assert write["value"] == 0
        assert write["args"] == [
            SIGNER,
            101,
            bytes.fromhex(SIGNER[2:]),
            7,
            SIGNER,
            ZERO_ADDRESS,
            b"",
        ]
        assert result == {
            "hash": result["hash"],
            "dstChainId": 101,
            "tokenId": "7",
            "to": SIGNER,
        }

    async def test_bridge_to_other_address(self, chain, resolver, context) -> None:
        await BridgeNftTool(chain, resolver).execute(
            context, srcContract=TOKEN, dstChainId=110, tokenId="7", to=ALICE
        )
        assert chain.calls("write_contract")[0]["args"][2] == bytes.fromhex(ALICE[2:])

    async def test_requires_signer(self, context) -> None:
        chain = FakeChainClient(signer=None)
        with pytest.raises(ConfigError):
            await BridgeNftTool(chain, AddressResolver(chain)).execute(
                context, srcContract=TOKEN, dstChainId=101, tokenId="7"
            )

    async def test_chain_id_range(self, chain, resolver, context) -> None:
        with pytest.raises(ValidationError, match="dstChainId"):
            await BridgeNftTool(chain, resolver).execute(
                context, srcContract=TOKEN, dstChainId=70000, tokenId="7"
            )

    def test_annotations(self, chain, resolver) -> None:
        assert BridgeNftTool(chain, resolver).annotations.title == "Bridge NFT"
        assert MintNftTool(chain, resolver).annotations.destructive
