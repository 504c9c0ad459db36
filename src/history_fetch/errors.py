"""Exceptions raised while fetching historical tables."""

from __future__ import annotations

from typing import Optional


class HistoryFetchError(RuntimeError):
    """Base class for every error raised by history_fetch."""


class SymbolNotFound(HistoryFetchError):
    """Raised when the endpoint answers 404 for a symbol."""

    def __init__(self, symbol: str):
        super().__init__(f"{symbol} not found at Yahoo")
        self.symbol = symbol


class ProtocolError(HistoryFetchError):
    """Raised for unexpected status codes, malformed bodies and transport failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        body_prefix: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.body_prefix = body_prefix


__all__ = ["HistoryFetchError", "ProtocolError", "SymbolNotFound"]
