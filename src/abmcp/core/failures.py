"""Classification of external-capability failures.

Only the boundary adapters (the web3 chain client and the deployment
backends) call into this module.  Everything above them sees an
:class:`ExternalCallError` with a :class:`FailureKind`, never a raw
library exception.

The mapping is data: exception types are checked first, in order,
then lowercase message substrings, in order.  First match wins.
"""

from __future__ import annotations

import logging

from web3.exceptions import ContractLogicError, TimeExhausted

from abmcp.core.errors import ExternalCallError, FailureKind

logger = logging.getLogger(__name__)

# TimeoutError subclasses OSError, so it must come before ConnectionError.
_EXCEPTION_KINDS: tuple[tuple[type[BaseException], FailureKind], ...] = (
    (TimeoutError, FailureKind.TIMEOUT),
    (TimeExhausted, FailureKind.TIMEOUT),
    (ContractLogicError, FailureKind.CONTRACT_REVERT),
    (ConnectionError, FailureKind.NETWORK),
)

_MESSAGE_PATTERNS: tuple[tuple[str, FailureKind], ...] = (
    ("insufficient funds", FailureKind.INSUFFICIENT_FUNDS),
    ("insufficient balance", FailureKind.INSUFFICIENT_FUNDS),
    ("execution reverted", FailureKind.CONTRACT_REVERT),
    ("timed out", FailureKind.TIMEOUT),
    ("timeout", FailureKind.TIMEOUT),
    ("private key", FailureKind.INVALID_KEY),
    ("invalid key", FailureKind.INVALID_KEY),
    ("econnrefused", FailureKind.NETWORK),
    ("connection", FailureKind.NETWORK),
    ("network", FailureKind.NETWORK),
)

FRIENDLY_MESSAGES: dict[FailureKind, str] = {
    FailureKind.INSUFFICIENT_FUNDS: (
        "Insufficient funds in wallet for this transaction. "
        "Please fund your wallet and try again."
    ),
    FailureKind.NETWORK: (
        "Network connection issue. Please check your RPC URL and try again."
    ),
    FailureKind.TIMEOUT: (
        "The request timed out. Please check your RPC URL and try again."
    ),
    FailureKind.INVALID_KEY: (
        "Invalid private key. "
        "Please check your ABSTRACT_PRIVATE_KEY environment variable."
    ),
    FailureKind.CONTRACT_REVERT: "The contract rejected the call (execution reverted).",
}


def classify_failure(error: BaseException | str) -> FailureKind:
    """Return the failure kind for an exception or raw message."""
    if isinstance(error, BaseException):
        for exc_type, kind in _EXCEPTION_KINDS:
            if isinstance(error, exc_type):
                return kind
        message = str(error)
    else:
        message = error

    lowered = message.lower()
    for pattern, kind in _MESSAGE_PATTERNS:
        if pattern in lowered:
            return kind
    return FailureKind.UNKNOWN


def external_call_error(
    error: BaseException | str,
    *,
    operation: str,
    kind: FailureKind | None = None,
) -> ExternalCallError:
    """Build (and log) an :class:`ExternalCallError` for a failed call.

    Args:
        error: The library exception or raw failure text.
        operation: Short name of the attempted call, used in logs and
            in the fallback message.
        kind: Force a kind instead of classifying ``error``.  A
            recognisable message still wins over a forced
            ``PROCESS_EXIT`` so that, for example, a deployment script
            that died of insufficient funds is reported as such.
    """
    detail = str(error) or type(error).__name__
    classified = classify_failure(error)
    if kind is None or (
        kind is FailureKind.PROCESS_EXIT and classified is not FailureKind.UNKNOWN
    ):
        kind = classified

    message = FRIENDLY_MESSAGES.get(kind, f"{operation} failed: {detail}")
    logger.warning(
        "external call failed operation=%s kind=%s detail=%s",
        operation,
        kind.value,
        detail,
    )
    return ExternalCallError(kind, message, detail=detail)
