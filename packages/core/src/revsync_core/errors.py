"""Exception hierarchy shared by the engine, the gateways and the CLI."""

from __future__ import annotations


class RevsyncError(Exception):
    """Base class for every error raised by revsync."""


class GatewayError(RevsyncError):
    """A remote comment operation failed.

    Gateways translate their client library's exceptions into this type so the
    engine can decide per call whether a failure is recoverable.
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ReportError(RevsyncError, ValueError):
    """The violation report could not be read or has an invalid entry."""
