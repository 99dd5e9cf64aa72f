"""Root error class for the mp-commandkit error hierarchy."""

from __future__ import annotations

from typing import Any, ClassVar


class BaseError(Exception):
    """Root of the error hierarchy.

    Every error carries a stable ``code`` slug and a ``detail`` mapping with
    the identifiers involved (command name, execution mode, plugin, option),
    so a log line can be built from :meth:`to_dict` alone::

        _log.error("command.failed", **error_fields(exc))

    Control-flow signals (:mod:`mp_commandkit.kernel.signals`) are *not*
    part of this hierarchy; catching ``BaseError`` never swallows a signal.
    """

    default_code: ClassVar[str] = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        cause: BaseException | None = None,
        **detail: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = detail
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}[{self.code}]({self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": type(self).__name__,
            "code": self.code,
            "message": self.message,
        }
        if self.detail:
            payload["detail"] = dict(self.detail)
        if self.__cause__ is not None:
            payload["cause"] = repr(self.__cause__)
        return payload


def error_fields(exc: BaseException) -> dict[str, Any]:
    """structlog key/values describing *exc*; ``message`` is renamed ``reason``."""
    if isinstance(exc, BaseError):
        fields = exc.to_dict()
        fields["reason"] = fields.pop("message")
        return fields
    return {"error": type(exc).__name__, "reason": str(exc)}


__all__ = ["BaseError", "error_fields"]
