"""Tests for smart-account deployment: the tool and the AGW factory backend."""

from __future__ import annotations

import json

import pytest
from eth_abi import decode
from eth_utils import function_signature_to_4byte_selector, keccak

from abmcp.chain.address import AddressResolver
from abmcp.config.schema import SmartAccountConfig
from abmcp.core.errors import ConfigError, ParseError, ResolutionError
from abmcp.deploy.base import SmartAccountDeployment
from abmcp.deploy.smart_account import (
    FactorySmartAccountDeployer,
    account_salt,
    initializer_calldata,
)
from abmcp.tools.create_wallet import CreateWalletTool
from tests.fixtures.chain import ALICE, SIGNER, FakeAccountDeployer, FakeChainClient

FACTORY = "0x9B947df68D35281C972511B3E7BC875926f26C1A"
VALIDATOR = "0x74b9ae28EC45E3FA11533c7954752597C3De3e7A"
ACCOUNT = "0x5555555555555555555555555555555555555555"


def _tool(chain: FakeChainClient, deployer) -> CreateWalletTool:
    return CreateWalletTool(chain, AddressResolver(chain), deployer)


# ── Tool ─────────────────────────────────────────────────────────


class TestCreateWalletTool:
    async def test_defaults_to_server_wallet(self, chain, context) -> None:
        deployer = FakeAccountDeployer()
        result = json.loads(await _tool(chain, deployer).execute(context))
        assert deployer.calls == [SIGNER]
        assert result["signer"] == SIGNER
        assert result["smartAccountAddress"] == ACCOUNT
        assert result["deploymentTransaction"].startswith("0x")

    async def test_explicit_ens_signer(self, context) -> None:
        chain = FakeChainClient(ens={"alice.eth": ALICE})
        deployer = FakeAccountDeployer()
        result = json.loads(await _tool(chain, deployer).execute(context, signer="alice.eth"))
        assert deployer.calls == [ALICE]
        assert result["signer"] == ALICE

    async def test_existing_account_has_null_transaction(self, chain, context) -> None:
        deployer = FakeAccountDeployer(SmartAccountDeployment(address=ACCOUNT))
        result = json.loads(await _tool(chain, deployer).execute(context))
        assert result["deploymentTransaction"] is None

    async def test_unresolvable_signer(self, chain, context) -> None:
        deployer = FakeAccountDeployer()
        with pytest.raises(ResolutionError, match="signer"):
            await _tool(chain, deployer).execute(context, signer="nobody.eth")
        assert deployer.calls == []

    async def test_no_signer_configured(self, context) -> None:
        chain = FakeChainClient(signer=None)
        with pytest.raises(ConfigError):
            await _tool(chain, FakeAccountDeployer()).execute(context)

    def test_annotations(self, chain) -> None:
        ann = _tool(chain, FakeAccountDeployer()).annotations
        assert ann.title == "AGW • Deploy Smart Account"
        assert ann.destructive


# ── Calldata ─────────────────────────────────────────────────────


class TestCalldata:
    def test_salt_is_keccak_of_address_bytes(self) -> None:
        assert account_salt(ALICE) == keccak(bytes.fromhex(ALICE[2:]))
        assert len(account_salt(ALICE)) == 32

    def test_initializer_layout(self) -> None:
        data = initializer_calldata(ALICE, VALIDATOR)
        selector = function_signature_to_4byte_selector(
            "initialize(address,address,bytes[],(address,uint256,bytes))"
        )
        assert data[:4] == selector
        signer, validator, modules, call = decode(
            ["address", "address", "bytes[]", "(address,uint256,bytes)"], data[4:]
        )
        assert signer.lower() == ALICE.lower()
        assert validator.lower() == VALIDATOR.lower()
        assert modules == ()
        assert call[1] == 0
        assert call[2] == b""


# ── Factory backend ──────────────────────────────────────────────


def _factory_chain(**kwargs) -> FakeChainClient:
    reads = {(FACTORY, "getAddressForSalt"): ACCOUNT}
    return FakeChainClient(reads=reads, **kwargs)


def _backend(chain: FakeChainClient, **config) -> FactorySmartAccountDeployer:
    config.setdefault("factory_address", FACTORY)
    config.setdefault("validator_address", VALIDATOR)
    return FactorySmartAccountDeployer(
        chain, AddressResolver(chain), SmartAccountConfig(**config)
    )


class TestFactoryDeployer:
    async def test_deploys_new_account(self) -> None:
        chain = _factory_chain()
        deployment = await _backend(chain).deploy_account(ALICE)
        assert deployment.address == ACCOUNT
        assert deployment.transaction_hash is not None

        (read,) = chain.calls("read_contract")
        assert read["args"] == [account_salt(ALICE)]
        (write,) = chain.calls("write_contract")
        assert write["address"] == FACTORY
        assert write["function"] == "deployAccount"
        assert write["args"] == [account_salt(ALICE), initializer_calldata(ALICE, VALIDATOR)]

    async def test_existing_account_sends_nothing(self) -> None:
        chain = _factory_chain(code={ACCOUNT: b"\x00\x01"})
        deployment = await _backend(chain).deploy_account(ALICE)
        assert deployment == SmartAccountDeployment(address=ACCOUNT)
        assert chain.calls("write_contract") == []

    @pytest.mark.parametrize("missing", ["factory_address", "validator_address"])
    async def test_missing_config(self, missing) -> None:
        chain = _factory_chain()
        with pytest.raises(ConfigError, match=missing):
            await _backend(chain, **{missing: None}).deploy_account(ALICE)
        assert chain.call_log == []

    async def test_bad_factory_result(self) -> None:
        chain = FakeChainClient(reads={(FACTORY, "getAddressForSalt"): "garbage"})
        with pytest.raises(ParseError):
            await _backend(chain).deploy_account(ALICE)
