"""Unit tests for DispatchSettings and its COMMANDKIT_* reader."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from mp_commandkit.config import ConfigError, DispatchSettings, InvalidSettingValueError


class TestDispatchSettings:
    def test_defaults(self) -> None:
        settings = DispatchSettings()
        assert settings.default_prefix == "!"
        assert settings.disable_permissions_middleware is False
        assert settings.development is False
        assert settings.ignore_bots is True
        assert settings.log_level == "INFO"

    def test_blank_prefix_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            DispatchSettings(default_prefix="")
        with pytest.raises(InvalidSettingValueError):
            DispatchSettings(default_prefix=" !")

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(InvalidSettingValueError) as info:
            DispatchSettings(log_level="LOUD")
        assert info.value.setting == "log_level"
        assert isinstance(info.value, ConfigError)

    def test_env_key(self) -> None:
        assert DispatchSettings.env_key("ignore_bots") == "COMMANDKIT_IGNORE_BOTS"


# ---------------------------------------------------------------------------
# from_env
# ---------------------------------------------------------------------------


class TestFromEnv:
    def test_reads_prefixed_variables(self, tmp_path: Path) -> None:
        settings = DispatchSettings.from_env(
            tmp_path / "missing.env",
            environ={
                "COMMANDKIT_DEFAULT_PREFIX": "?",
                "COMMANDKIT_DEVELOPMENT": "yes",
                "COMMANDKIT_IGNORE_BOTS": "0",
                "OTHER_DEFAULT_PREFIX": "$",
            },
        )
        assert settings.default_prefix == "?"
        assert settings.development is True
        assert settings.ignore_bots is False

    def test_environment_wins_over_dotenv(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("COMMANDKIT_LOG_LEVEL=DEBUG\nCOMMANDKIT_DEFAULT_PREFIX=>\n")
        settings = DispatchSettings.from_env(env_file, environ={"COMMANDKIT_DEFAULT_PREFIX": "?"})
        assert settings.log_level == "DEBUG"
        assert settings.default_prefix == "?"

    def test_dotenv_does_not_touch_process_environment(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.delenv("COMMANDKIT_LOG_LEVEL", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("COMMANDKIT_LOG_LEVEL=WARNING\n")
        assert DispatchSettings.from_env(env_file).log_level == "WARNING"
        assert "COMMANDKIT_LOG_LEVEL" not in os.environ

    def test_overrides_win(self, tmp_path: Path) -> None:
        settings = DispatchSettings.from_env(
            tmp_path / "missing.env",
            environ={"COMMANDKIT_DEFAULT_PREFIX": "?"},
            default_prefix=">",
        )
        assert settings.default_prefix == ">"

    def test_invalid_boolean_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidSettingValueError) as info:
            DispatchSettings.from_env(
                tmp_path / "missing.env", environ={"COMMANDKIT_IGNORE_BOTS": "maybe"}
            )
        assert info.value.setting == "COMMANDKIT_IGNORE_BOTS"

    def test_invalid_value_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidSettingValueError):
            DispatchSettings.from_env(tmp_path / "missing.env", environ={"COMMANDKIT_LOG_LEVEL": "LOUD"})

    def test_settings_are_frozen(self) -> None:
        settings = DispatchSettings()
        with pytest.raises(AttributeError):
            settings.default_prefix = "?"  # type: ignore[misc]
