"""Abstract network definitions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Network:
    """Static metadata about a supported chain."""

    name: str
    chain_id: int
    rpc_url: str
    native_symbol: str = "ETH"
    native_decimals: int = 18


ABSTRACT_TESTNET = Network(
    name="Abstract Testnet",
    chain_id=11124,
    rpc_url="https://api.testnet.abs.xyz",
)

ABSTRACT_MAINNET = Network(
    name="Abstract Mainnet",
    chain_id=2741,
    rpc_url="https://api.mainnet.abs.xyz/",
)

NETWORKS: dict[str, Network] = {
    "testnet": ABSTRACT_TESTNET,
    "mainnet": ABSTRACT_MAINNET,
}


def get_network(name: str) -> Network:
    """Look up a network by config name.

    Raises:
        KeyError: If the network is unknown.
    """
    if name not in NETWORKS:
        msg = f"Unknown network: {name}"
        raise KeyError(msg)
    return NETWORKS[name]
