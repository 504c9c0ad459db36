"""Yahoo Finance table.csv request builder and response classifier."""

from __future__ import annotations

from datetime import date

from .base import (
    HistoryResponse,
    NotFound,
    Outcome,
    ProtocolFailure,
    Query,
    RequestDescriptor,
    Success,
    SuccessCallback,
)

DEFAULT_BASE_URL = "http://itable.finance.yahoo.com"
EXPECTED_HEADER = "Date,Open,High,Low,Close,Volume,Adj Close"


def build_url(symbol: str, start: date, end: date, base_url: str = DEFAULT_BASE_URL) -> str:
    # The endpoint counts months from zero.
    return (
        f"{base_url}/table.csv?s={symbol}&g=d"
        f"&a={start.month - 1}&b={start.day}&c={start.year}"
        f"&d={end.month - 1}&e={end.day}&f={end.year}"
    )


def build_request(
    symbol: str,
    start: date,
    end: date,
    callback: SuccessCallback | None = None,
    base_url: str = DEFAULT_BASE_URL,
) -> RequestDescriptor:
    query = Query(symbol=symbol, start=start, end=end, on_success=callback)
    return RequestDescriptor(url=build_url(symbol, start, end, base_url), query=query)


def classify(response: HistoryResponse, descriptor: RequestDescriptor) -> Outcome:
    """Decide whether a completed response carries a usable table.

    A 200 is only trusted when the body starts with the CSV header line; the
    endpoint is known to serve HTML error pages with a 200 status.
    """
    status = response.status_code
    if status == 200:
        prefix = response.body[: len(EXPECTED_HEADER)]
        if prefix == EXPECTED_HEADER:
            return Success(body=response.body)
        return ProtocolFailure(
            status_code=status,
            url=descriptor.url,
            message=(
                f"Unknown response body from Yahoo. Response code {status}. "
                f"URL: {descriptor.url}. Body starts with: {prefix!r}"
            ),
            body_prefix=prefix,
        )
    if status == 404:
        return NotFound(symbol=descriptor.symbol)
    return ProtocolFailure(
        status_code=status,
        url=descriptor.url,
        message=f"Error communicating with Yahoo. Response code {status}. URL: {descriptor.url}",
    )


__all__ = ["DEFAULT_BASE_URL", "EXPECTED_HEADER", "build_request", "build_url", "classify"]
