"""Tests for the composer error taxonomy."""

from __future__ import annotations

from composer.exceptions import (
    ComposerError,
    InvalidOptionError,
    MissingPartyError,
    NetworkError,
    ServiceError,
    ValidationError,
)


class TestToDict:
    def test_validation_error_names_field(self) -> None:
        error = InvalidOptionError("arbitration", "icc_provider")
        assert isinstance(error, ValidationError)
        assert error.to_dict() == {
            "kind": "InvalidOptionError",
            "error": error.message,
            "field": "arbitration",
            "value": "icc_provider",
        }

    def test_service_error_keeps_status(self) -> None:
        record = ServiceError("Monthly contract limit reached", status_code=429).to_dict()
        assert record == {
            "kind": "ServiceError",
            "error": "Monthly contract limit reached",
            "status_code": 429,
        }

    def test_network_error_hides_cause_from_message(self) -> None:
        error = NetworkError("generate_contract", "connection refused")
        assert isinstance(error, ComposerError)
        assert error.message == "Network error. Please try again."
        assert error.to_dict()["cause"] == "connection refused"

    def test_long_values_are_truncated(self) -> None:
        error = ValidationError("Too long", field="purpose", value="x" * 500)
        assert len(error.to_dict()["value"]) == 100

    def test_party_error_message(self) -> None:
        assert str(MissingPartyError("clientName")) == "Please fill in all general information fields."
