"""Shared test fixtures for abmcp."""

from __future__ import annotations

from typing import Any

import pytest

from abmcp.chain.address import AddressResolver
from abmcp.chain.tokens import NATIVE_ETH, TokenInfo, TokenRegistry
from abmcp.tools.base import ToolCall, ToolContext
from tests.fixtures.chain import USDC, FakeChainClient

_ABMCP_ENV = (
    "ABSTRACT_RPC_URL",
    "RPC_URL",
    "ABSTRACT_PRIVATE_KEY",
    "PRIVATE_KEY",
    "TESTNET",
    "ABMCP_CONFIG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Isolate tests from the developer's env and config files."""
    for name in _ABMCP_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def chain() -> FakeChainClient:
    """Fake chain client with a configured signer."""
    return FakeChainClient()


@pytest.fixture
def resolver(chain: FakeChainClient) -> AddressResolver:
    return AddressResolver(chain)


@pytest.fixture
def tokens() -> TokenRegistry:
    """Registry with ETH plus a 6-decimal USDC."""
    return TokenRegistry([NATIVE_ETH, TokenInfo(symbol="USDC", address=USDC, decimals=6)])


@pytest.fixture
def context() -> ToolContext:
    return ToolContext.for_call(ToolCall(id="test-call", name="test_tool"))
