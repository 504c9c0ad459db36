"""Request and response types shared by the builder, classifier and scheduler."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Union

from ..errors import HistoryFetchError, ProtocolError, SymbolNotFound

SuccessCallback = Callable[[str], None]


@dataclass(frozen=True)
class Query:
    symbol: str
    start: date
    end: date
    on_success: Optional[SuccessCallback] = None


@dataclass(frozen=True)
class RequestDescriptor:
    url: str
    query: Query
    method: str = "GET"

    @property
    def symbol(self) -> str:
        return self.query.symbol


@dataclass(frozen=True)
class HistoryResponse:
    status_code: int
    body: str


@dataclass(frozen=True)
class Success:
    body: str


@dataclass(frozen=True)
class NotFound:
    symbol: str

    def to_error(self) -> HistoryFetchError:
        return SymbolNotFound(self.symbol)


@dataclass(frozen=True)
class ProtocolFailure:
    status_code: int
    url: str
    message: str
    body_prefix: Optional[str] = None

    def to_error(self) -> HistoryFetchError:
        return ProtocolError(
            self.message,
            status_code=self.status_code,
            url=self.url,
            body_prefix=self.body_prefix,
        )


Outcome = Union[Success, NotFound, ProtocolFailure]


@dataclass(frozen=True)
class FetchResult:
    """Body delivered for one successful query."""

    query: Query
    url: str
    body: str

    @property
    def symbol(self) -> str:
        return self.query.symbol


__all__ = [
    "FetchResult",
    "HistoryResponse",
    "NotFound",
    "Outcome",
    "ProtocolFailure",
    "Query",
    "RequestDescriptor",
    "Success",
    "SuccessCallback",
]
