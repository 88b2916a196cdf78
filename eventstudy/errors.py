"""Event study exceptions."""

from __future__ import annotations


class EventStudyError(Exception):
    """Base class for event study errors."""


class InvalidPriceError(EventStudyError, ValueError):
    """A price series contains a zero, negative, or non-finite price."""


class InvalidArgumentError(EventStudyError, ValueError):
    """A resampling parameter is out of range."""


class DataUnavailableError(EventStudyError):
    """A collaborator could not supply the requested data.

    Attributes:
        symbol: Ticker the request was for, if known.
    """

    def __init__(self, message: str, symbol: str | None = None) -> None:
        super().__init__(message)
        self.symbol = symbol
