"""Core errors and failure classification."""

from abmcp.core.errors import (
    AbmcpError,
    AmountPrecisionError,
    ConfigError,
    ConfigurationError,
    ExternalCallError,
    FailureKind,
    ParseError,
    ResolutionError,
    UnknownSymbolError,
    ValidationError,
)
from abmcp.core.failures import classify_failure, external_call_error

__all__ = [
    "AbmcpError",
    "AmountPrecisionError",
    "ConfigError",
    "ConfigurationError",
    "ExternalCallError",
    "FailureKind",
    "ParseError",
    "ResolutionError",
    "UnknownSymbolError",
    "ValidationError",
    "classify_failure",
    "external_call_error",
]
