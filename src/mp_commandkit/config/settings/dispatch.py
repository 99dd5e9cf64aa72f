"""Config settings – DispatchSettings and its ``COMMANDKIT_*`` reader."""
from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Mapping
from typing import Any, ClassVar

from dotenv import dotenv_values

from mp_commandkit.config.validation import InvalidSettingValueError

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def _coerce(key: str, raw: str, type_hint: Any) -> Any:
    if type_hint is bool or type_hint == "bool":
        value = raw.strip().lower()
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
        raise InvalidSettingValueError(key, raw, "expected a boolean")
    return raw


@dataclasses.dataclass(frozen=True)
class DispatchSettings:
    """Runtime configuration of the dispatcher.

    Every field maps to one ``COMMANDKIT_<FIELD>`` variable, e.g.
    ``COMMANDKIT_DEFAULT_PREFIX=?`` or ``COMMANDKIT_IGNORE_BOTS=false``.
    """

    ENV_PREFIX: ClassVar[str] = "COMMANDKIT_"

    default_prefix: str = "!"
    disable_permissions_middleware: bool = False
    development: bool = False
    ignore_bots: bool = True
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.default_prefix or self.default_prefix.strip() != self.default_prefix:
            raise InvalidSettingValueError(
                "default_prefix", self.default_prefix, "must be non-empty without surrounding spaces"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise InvalidSettingValueError("log_level", self.log_level, "unknown logging level")

    @classmethod
    def env_key(cls, field_name: str) -> str:
        return f"{cls.ENV_PREFIX}{field_name.upper()}"

    @classmethod
    def from_env(
        cls,
        dotenv_path: str | os.PathLike[str] | None = ".env",
        *,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> "DispatchSettings":
        """Build settings from ``COMMANDKIT_*`` variables.

        Sources, lowest priority first: the *dotenv_path* file (a missing
        file contributes nothing), the process environment (or *environ*),
        then *overrides* keyed by field name. The process environment is
        never modified.

        Raises
        ------
        InvalidSettingValueError
            When a boolean variable is not one of ``1/0``, ``true/false``,
            ``yes/no``, ``on/off``, or when a value fails validation.
        """
        source: dict[str, str | None] = {}
        if dotenv_path is not None:
            source.update(dotenv_values(dotenv_path))
        source.update(os.environ if environ is None else environ)

        values: dict[str, Any] = {}
        for field in dataclasses.fields(cls):
            key = cls.env_key(field.name)
            raw = source.get(key)
            if raw is not None:
                values[field.name] = _coerce(key, raw, field.type)
        values.update(overrides)
        return cls(**values)


__all__ = ["DispatchSettings"]
