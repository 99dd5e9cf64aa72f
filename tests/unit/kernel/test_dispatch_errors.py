"""Unit tests for the dispatch error hierarchy."""

from __future__ import annotations

from mp_commandkit.kernel.errors import (
    BaseError,
    CommandNotFoundError,
    DispatchError,
    EnvironmentTypeNotSetError,
    ExecutionErrorAlreadySetError,
    MissingHandlerError,
    MissingOptionError,
    NoEnvironmentError,
    PluginError,
    UnknownExecutionModeError,
    error_fields,
)


class TestBaseError:
    def test_default_code(self) -> None:
        err = BaseError("boom")
        assert err.code == "base_error"
        assert err.message == "boom"

    def test_str_is_the_message(self) -> None:
        err = DispatchError("bad", attempt=1)
        assert str(err) == "bad"
        assert err.detail == {"attempt": 1}
        assert err.to_dict() == {
            "error": "DispatchError",
            "code": "dispatch_error",
            "message": "bad",
            "detail": {"attempt": 1},
        }

    def test_cause_is_chained(self) -> None:
        cause = ValueError("inner")
        err = DispatchError("outer", cause=cause)
        assert err.__cause__ is cause
        assert err.to_dict()["cause"] == repr(cause)


class TestDispatchErrors:
    def test_all_are_dispatch_errors(self) -> None:
        errors = [
            CommandNotFoundError("ping"),
            MissingHandlerError("ping", "message"),
            UnknownExecutionModeError("bogus"),
            NoEnvironmentError(),
            ExecutionErrorAlreadySetError(),
            EnvironmentTypeNotSetError(),
            MissingOptionError("user"),
            PluginError("p", "failed"),
        ]
        for err in errors:
            assert isinstance(err, DispatchError)

    def test_codes(self) -> None:
        assert CommandNotFoundError("x").code == "command_not_found"
        assert MissingHandlerError("x", "ai").code == "missing_handler"
        assert NoEnvironmentError().code == "no_environment"

    def test_messages(self) -> None:
        assert CommandNotFoundError("ping").message == "Command 'ping' not found"
        assert MissingOptionError("user").message == 'Option "user" is required'
        assert (
            MissingOptionError("subcommand", kind="Subcommand").message
            == 'Subcommand "subcommand" is required'
        )

    def test_no_environment_custom_message(self) -> None:
        assert NoEnvironmentError("outside").message == "outside"
        assert "command handler" in NoEnvironmentError().message

    def test_attributes(self) -> None:
        err = MissingHandlerError("ping", "ai")
        assert (err.command_name, err.mode) == ("ping", "ai")
        assert PluginError("analytics", "x").plugin_name == "analytics"

    def test_detail_names_the_identifiers(self) -> None:
        assert MissingHandlerError("ping", "ai").detail == {"command": "ping", "mode": "ai"}
        assert CommandNotFoundError("ping").detail == {"command": "ping"}
        assert MissingOptionError("user").detail == {"option": "user"}
        assert PluginError("analytics", "x").detail == {"plugin": "analytics"}
        assert UnknownExecutionModeError("bogus").detail == {"mode": "bogus"}


# ---------------------------------------------------------------------------
# error_fields
# ---------------------------------------------------------------------------


class TestErrorFields:
    def test_base_error(self) -> None:
        fields = error_fields(CommandNotFoundError("ping"))
        assert fields == {
            "error": "CommandNotFoundError",
            "code": "command_not_found",
            "reason": "Command 'ping' not found",
            "detail": {"command": "ping"},
        }

    def test_foreign_exception(self) -> None:
        assert error_fields(ValueError("nope")) == {"error": "ValueError", "reason": "nope"}
