"""Tests for error_handler and custom exceptions."""

from __future__ import annotations

import pytest

from deploy_status.client.errors import (
    ConfigurationError,
    DecodingError,
    DeployStatusError,
    InvalidCredentialError,
    ProviderConnectionError,
    RateLimitedError,
    ServerError,
    error_handler,
)


class TestExceptionHierarchy:
    def test_base_error(self):
        exc = DeployStatusError("test")
        assert str(exc) == "test"
        assert exc.exit_code == 1

    def test_connection_error(self):
        exc = ProviderConnectionError("cannot connect")
        assert isinstance(exc, DeployStatusError)
        assert exc.exit_code == 2

    def test_invalid_credential_default_message(self):
        exc = InvalidCredentialError()
        assert exc.exit_code == 3
        assert str(exc) == "Invalid or expired API token. Please check your token."

    def test_rate_limited_with_retry_after(self):
        exc = RateLimitedError(30.0)
        assert exc.exit_code == 4
        assert exc.retry_after == 30.0
        assert "30 seconds" in str(exc)

    def test_rate_limited_without_retry_after(self):
        exc = RateLimitedError()
        assert exc.retry_after is None
        assert "later" in str(exc)

    def test_decoding_error(self):
        assert str(DecodingError()) == "Failed to parse response"
        assert str(DecodingError("bad json")) == "Failed to parse response: bad json"
        assert DecodingError().exit_code == 5

    def test_configuration_error(self):
        exc = ConfigurationError("no token")
        assert isinstance(exc, DeployStatusError)
        assert exc.exit_code == 6

    def test_server_error(self):
        exc = ServerError(500, "boom")
        assert exc.exit_code == 7
        assert exc.status_code == 500
        assert str(exc) == "Server error (500): boom"
        assert str(ServerError(502)) == "Server error: 502"


class TestErrorHandler:
    def test_passes_through_on_success(self):
        @error_handler
        def ok():
            return 42

        assert ok() == 42

    def test_deploy_status_error_exits_with_code(self, capsys):
        @error_handler
        def fail():
            raise InvalidCredentialError()

        with pytest.raises(SystemExit) as exc_info:
            fail()
        assert exc_info.value.code == 3

    def test_value_error_exits_1(self):
        @error_handler
        def fail():
            raise ValueError("bad input")

        with pytest.raises(SystemExit) as exc_info:
            fail()
        assert exc_info.value.code == 1

    def test_other_exceptions_propagate(self):
        @error_handler
        def fail():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            fail()
