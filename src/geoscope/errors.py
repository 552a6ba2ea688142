"""Exception types raised by geoscope."""

from __future__ import annotations


class GeoScopeError(Exception):
    """Base class for all geoscope errors."""


class InvalidArgumentError(GeoScopeError, ValueError):
    """An argument is outside the accepted set (edition name, engine, cache mode)."""


class OpenError(GeoScopeError, OSError):
    """A database could not be opened.

    ``diagnostic`` holds whatever the engine wrote to stderr while the open
    was in progress. It is always a string, empty when the engine was silent.
    """

    def __init__(self, message: str, diagnostic: str = ""):
        super().__init__(message)
        self.diagnostic = diagnostic or ""

    def __str__(self) -> str:
        message = super().__str__()
        if self.diagnostic:
            return f"{message}: {self.diagnostic}"
        return message


class UnsupportedEditionError(GeoScopeError):
    """The opened database type has no field table."""


class ClosedHandleError(GeoScopeError, ValueError):
    """Operation on a database or result that has already been released."""


class EngineError(GeoScopeError):
    """Failure reported by an engine backend."""
