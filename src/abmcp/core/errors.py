"""Exception hierarchy for abmcp.

Every module imports from here. The hierarchy is:

    AbmcpError
    ├── ValidationError
    │   └── AmountPrecisionError(amount, decimals)
    ├── ResolutionError(identifier)
    ├── UnknownSymbolError(symbol)
    ├── ConfigError
    ├── ExternalCallError(kind, detail)
    └── ParseError
"""

from __future__ import annotations

import enum


class AbmcpError(Exception):
    """Base exception for all abmcp errors."""


# ─── Input Errors ─────────────────────────────────────────────


class ValidationError(AbmcpError):
    """Malformed or contradictory input. Raised before any network call."""


class AmountPrecisionError(ValidationError):
    """Amount has more fractional digits than the token supports."""

    def __init__(self, amount: str, decimals: int) -> None:
        self.amount = amount
        self.decimals = decimals
        super().__init__(
            f"Amount {amount!r} has more than {decimals} fractional digits"
        )


class ResolutionError(AbmcpError):
    """An address or ENS-like name could not be resolved."""

    def __init__(self, identifier: str, role: str = "") -> None:
        self.identifier = identifier
        self.role = role
        label = f"{role} address" if role else "address"
        super().__init__(f"Unable to resolve {label}: {identifier}")


class UnknownSymbolError(AbmcpError):
    """Token symbol not present in the registry."""

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(f"Unknown token symbol {symbol}")


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(AbmcpError):
    """Missing or malformed configuration."""


ConfigurationError = ConfigError


# ─── External Call Errors ─────────────────────────────────────


class FailureKind(enum.Enum):
    """Categories of failure reported by an external capability."""

    INSUFFICIENT_FUNDS = "insufficient_funds"
    NETWORK = "network"
    TIMEOUT = "timeout"
    INVALID_KEY = "invalid_key"
    CONTRACT_REVERT = "contract_revert"
    PROCESS_EXIT = "process_exit"
    UNKNOWN = "unknown"


class ExternalCallError(AbmcpError):
    """The chain client or a deployment backend reported failure.

    ``str(err)`` is the operator-friendly message; ``detail`` keeps the
    raw message from the underlying library for logs.
    """

    def __init__(self, kind: FailureKind, message: str, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail or message
        super().__init__(message)


class ParseError(AbmcpError):
    """An external call succeeded but its output could not be interpreted."""
