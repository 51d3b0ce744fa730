"""Tests for the core error hierarchy."""

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


class TestHierarchy:
    """All errors inherit from AbmcpError."""

    def test_every_error_is_abmcp_error(self):
        errors = [
            ValidationError("bad"),
            AmountPrecisionError("1.0001", 2),
            ResolutionError("vitalik.eth"),
            UnknownSymbolError("FOO"),
            ConfigError("missing"),
            ExternalCallError(FailureKind.NETWORK, "down"),
            ParseError("garbled"),
        ]
        for err in errors:
            assert isinstance(err, AbmcpError)

    def test_precision_error_is_validation_error(self):
        assert isinstance(AmountPrecisionError("1.123", 2), ValidationError)

    def test_configuration_error_alias(self):
        assert ConfigurationError is ConfigError


class TestMessages:
    def test_precision_error_keeps_fields(self):
        err = AmountPrecisionError("0.1234567", 6)
        assert err.amount == "0.1234567"
        assert err.decimals == 6
        assert "6 fractional digits" in str(err)

    def test_resolution_error_with_role(self):
        err = ResolutionError("nobody.eth", role="recipient")
        assert str(err) == "Unable to resolve recipient address: nobody.eth"
        assert err.identifier == "nobody.eth"

    def test_resolution_error_without_role(self):
        assert str(ResolutionError("x")) == "Unable to resolve address: x"

    def test_unknown_symbol(self):
        err = UnknownSymbolError("DOGE")
        assert str(err) == "Unknown token symbol DOGE"
        assert err.symbol == "DOGE"

    def test_external_call_error_detail_defaults_to_message(self):
        err = ExternalCallError(FailureKind.TIMEOUT, "slow")
        assert err.kind is FailureKind.TIMEOUT
        assert err.detail == "slow"

    def test_external_call_error_keeps_raw_detail(self):
        err = ExternalCallError(FailureKind.NETWORK, "friendly", detail="ECONNREFUSED")
        assert str(err) == "friendly"
        assert err.detail == "ECONNREFUSED"
