"""Minimal ABI fragments for the contracts abmcp calls."""

from __future__ import annotations

from typing import Any

ERC20_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "decimals",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
    },
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "transfer",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
]

# Assumes the collection exposes mint(address,uint256).
ERC721_MINT_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "mint",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
        ],
        "outputs": [],
    },
]

# LayerZero ONFT sendFrom.
ONFT_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "sendFrom",
        "stateMutability": "payable",
        "inputs": [
            {"name": "_from", "type": "address"},
            {"name": "_dstChainId", "type": "uint16"},
            {"name": "_toAddress", "type": "bytes"},
            {"name": "_tokenId", "type": "uint256"},
            {"name": "_refundAddress", "type": "address"},
            {"name": "_zroPaymentAddress", "type": "address"},
            {"name": "_adapterParams", "type": "bytes"},
        ],
        "outputs": [],
    },
]

AGW_FACTORY_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "getAddressForSalt",
        "stateMutability": "view",
        "inputs": [{"name": "salt", "type": "bytes32"}],
        "outputs": [{"name": "accountAddress", "type": "address"}],
    },
    {
        "type": "function",
        "name": "deployAccount",
        "stateMutability": "payable",
        "inputs": [
            {"name": "salt", "type": "bytes32"},
            {"name": "initializer", "type": "bytes"},
        ],
        "outputs": [{"name": "accountAddress", "type": "address"}],
    },
]

AGW_INITIALIZE_SIGNATURE = "initialize(address,address,bytes[],(address,uint256,bytes))"
