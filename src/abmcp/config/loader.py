"""Configuration loading: TOML files, env var overrides, merge logic.

Discovery order (later overrides earlier):
    1. Built-in defaults (Pydantic model defaults)
    2. User config: ``~/.config/abmcp/config.toml``
    3. Project-local config: ``./abmcp.toml``
    4. ``$ABMCP_CONFIG`` environment variable (explicit path)
    5. Programmatic overrides (passed to ``load_config``)

Environment variables fill values the files leave unset:
    ``TESTNET`` selects the network (``"true"`` means testnet),
    ``chain.rpc_url_env`` (default ``ABSTRACT_RPC_URL``, then ``RPC_URL``)
    names the RPC endpoint, and ``chain.private_key_env`` (default
    ``ABSTRACT_PRIVATE_KEY``, then ``PRIVATE_KEY``) names the signer key.
"""

from __future__ import annotations

import os
import re
import tomllib
from pathlib import Path
from typing import Any

from abmcp.core.errors import ConfigError

from .schema import AbmcpConfig

_PRIVATE_KEY_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")

_FALLBACK_RPC_ENV = "RPC_URL"
_FALLBACK_KEY_ENV = "PRIVATE_KEY"


def _user_config_path() -> Path:
    """Return XDG-compliant user config path."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "abmcp" / "config.toml"


def _project_config_path() -> Path:
    """Return project-local config path."""
    return Path.cwd() / "abmcp.toml"


def _discover_config_files() -> list[Path]:
    """Return config files in merge order (first = lowest priority)."""
    paths: list[Path] = []

    user = _user_config_path()
    if user.is_file():
        paths.append(user)

    project = _project_config_path()
    if project.is_file():
        paths.append(project)

    env_path = os.environ.get("ABMCP_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.is_file():
            msg = f"ABMCP_CONFIG points to non-existent file: {env_path}"
            raise ConfigError(msg)
        paths.append(p)

    return paths


def _read_toml(path: Path) -> dict[str, Any]:
    """Read and parse a TOML file."""
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Cannot read config file {path}: {e}"
        raise ConfigError(msg) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override wins on conflicts."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _first_env(*names: str) -> tuple[str, str] | None:
    """Return ``(name, value)`` for the first non-empty env var."""
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return name, value
    return None


def normalize_private_key(value: str, *, source: str) -> str:
    """Return ``value`` as a ``0x``-prefixed 32-byte hex key.

    A bare 64-character hex key gets the prefix added.

    Raises:
        ConfigError: If the key is not 32 bytes of hex. The message
            names ``source`` but never echoes the key.
    """
    key = value.strip()
    if not key.startswith("0x"):
        key = f"0x{key}"
    if not _PRIVATE_KEY_RE.fullmatch(key):
        msg = (
            f"Invalid private key format in {source}. "
            "Must be 64 hex characters prefixed with 0x"
        )
        raise ConfigError(msg)
    return key


def _apply_network_env(merged: dict[str, Any]) -> dict[str, Any]:
    """Select the network from ``$TESTNET`` unless a file already did."""
    testnet = os.environ.get("TESTNET")
    if testnet is None:
        return merged
    chain = merged.get("chain", {})
    if "network" in chain:
        return merged
    network = "testnet" if testnet.strip().lower() == "true" else "mainnet"
    return _deep_merge(merged, {"chain": {"network": network}})


def _resolve_env(config: AbmcpConfig) -> None:
    """Resolve RPC URL and signer key from environment variables (in-place)."""
    chain = config.chain
    if chain.rpc_url is None:
        found = _first_env(chain.rpc_url_env, _FALLBACK_RPC_ENV)
        if found is not None:
            chain.rpc_url = found[1]

    source = "chain.private_key"
    if chain.private_key is None:
        found = _first_env(chain.private_key_env, _FALLBACK_KEY_ENV)
        if found is not None:
            source, chain.private_key = found
    if chain.private_key is not None:
        chain.private_key = normalize_private_key(chain.private_key, source=source)


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> AbmcpConfig:
    """Load and validate configuration.

    Args:
        path: Explicit config file path (highest file priority).
        overrides: Dict of overrides merged last (highest overall priority).

    Returns:
        Validated AbmcpConfig instance.

    Raises:
        ConfigError: On invalid TOML, missing files, validation failure,
            or a malformed private key.
    """
    merged: dict[str, Any] = {}

    files = _discover_config_files()

    # Explicit path overrides ABMCP_CONFIG
    if path is not None:
        p = Path(path)
        if not p.is_file():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg)
        files.append(p)

    for config_file in files:
        data = _read_toml(config_file)
        merged = _deep_merge(merged, data)

    if overrides:
        merged = _deep_merge(merged, overrides)

    merged = _apply_network_env(merged)

    try:
        config = AbmcpConfig.model_validate(merged)
    except Exception as e:
        msg = f"Configuration validation failed: {e}"
        raise ConfigError(msg) from e

    _resolve_env(config)

    return config
