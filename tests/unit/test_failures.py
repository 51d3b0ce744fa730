"""Tests for external failure classification."""

from __future__ import annotations

import pytest
from web3.exceptions import ContractLogicError

from abmcp.core.errors import ExternalCallError, FailureKind
from abmcp.core.failures import classify_failure, external_call_error

# ── classify_failure ─────────────────────────────────────────────


class TestClassifyFailure:
    @pytest.mark.parametrize(
        ("message", "kind"),
        [
            ("insufficient funds for gas * price + value", FailureKind.INSUFFICIENT_FUNDS),
            ("ERC20: transfer amount exceeds balance; insufficient balance", FailureKind.INSUFFICIENT_FUNDS),
            ("execution reverted: Ownable", FailureKind.CONTRACT_REVERT),
            ("request timed out", FailureKind.TIMEOUT),
            ("invalid private key length", FailureKind.INVALID_KEY),
            ("connect ECONNREFUSED 127.0.0.1:8545", FailureKind.NETWORK),
            ("something odd", FailureKind.UNKNOWN),
        ],
    )
    def test_message_patterns(self, message: str, kind: FailureKind) -> None:
        assert classify_failure(message) is kind

    def test_exception_type_wins_over_message(self) -> None:
        assert classify_failure(TimeoutError("insufficient funds")) is FailureKind.TIMEOUT

    def test_connection_error(self) -> None:
        assert classify_failure(ConnectionRefusedError("refused")) is FailureKind.NETWORK

    def test_contract_logic_error(self) -> None:
        assert classify_failure(ContractLogicError("boom")) is FailureKind.CONTRACT_REVERT

    def test_message_from_exception(self) -> None:
        exc = ValueError("Insufficient Funds")
        assert classify_failure(exc) is FailureKind.INSUFFICIENT_FUNDS


# ── external_call_error ──────────────────────────────────────────


class TestExternalCallError:
    def test_friendly_message_and_raw_detail(self) -> None:
        err = external_call_error(
            ValueError("insufficient funds for transfer"), operation="sendTransaction"
        )
        assert isinstance(err, ExternalCallError)
        assert err.kind is FailureKind.INSUFFICIENT_FUNDS
        assert str(err).startswith("Insufficient funds in wallet")
        assert err.detail == "insufficient funds for transfer"

    def test_unknown_falls_back_to_operation(self) -> None:
        err = external_call_error(RuntimeError("weird"), operation="getBalance")
        assert err.kind is FailureKind.UNKNOWN
        assert str(err) == "getBalance failed: weird"

    def test_forced_kind(self) -> None:
        err = external_call_error("exit 1", operation="deployToken", kind=FailureKind.TIMEOUT)
        assert err.kind is FailureKind.TIMEOUT

    def test_process_exit_reclassified_by_message(self) -> None:
        err = external_call_error(
            "Error: insufficient funds", operation="deployToken", kind=FailureKind.PROCESS_EXIT
        )
        assert err.kind is FailureKind.INSUFFICIENT_FUNDS
        assert err.detail == "Error: insufficient funds"

    def test_process_exit_kept_for_unrecognised_output(self) -> None:
        err = external_call_error(
            "Deployment failed", operation="deployToken", kind=FailureKind.PROCESS_EXIT
        )
        assert err.kind is FailureKind.PROCESS_EXIT
        assert str(err) == "deployToken failed: Deployment failed"

    def test_empty_message_uses_type_name(self) -> None:
        err = external_call_error(RuntimeError(), operation="getCode")
        assert err.detail == "RuntimeError"
