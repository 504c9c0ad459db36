"""Public entry point for batched historical table downloads."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import httpx

from .dates import DateLike, parse_date
from .providers.base import FetchResult, SuccessCallback
from .providers.yahoo import DEFAULT_BASE_URL, build_request
from .scheduler import BatchScheduler, ResponseCache

if TYPE_CHECKING:
    from .config.loader import ClientConfig


class HistoryClient:
    """Queue historical data queries and run them concurrently.

    Queries are only built and queued by :meth:`add_query`; nothing touches
    the network until :meth:`run` is called, which blocks until the whole
    queue has completed. With ``memoize`` enabled, identical requests made
    through this client are answered from a response cache.
    """

    def __init__(
        self,
        concurrency_cap: int = 20,
        memoize: bool = False,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self.cache = ResponseCache() if memoize else None
        self.scheduler = BatchScheduler(concurrency_cap, self._make_http_client, cache=self.cache)

    @classmethod
    def from_config(
        cls, config: "ClientConfig", transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "HistoryClient":
        return cls(
            concurrency_cap=config.concurrency_cap,
            memoize=config.memoize,
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )

    @property
    def concurrency_cap(self) -> int:
        return self.scheduler.concurrency_cap

    @property
    def memoize(self) -> bool:
        return self.cache is not None

    def add_query(
        self,
        symbol: str,
        start: DateLike,
        end: DateLike,
        callback: SuccessCallback | None = None,
    ) -> bool:
        """Queue a query for ``symbol`` between ``start`` and ``end``.

        Dates may be ``date`` objects or strings. ``callback`` is called once
        with the raw CSV body if the request succeeds.
        """
        if not symbol:
            raise ValueError("symbol must be a non-empty string")
        descriptor = build_request(
            symbol, parse_date(start), parse_date(end), callback, base_url=self.base_url
        )
        self.scheduler.enqueue(descriptor)
        return True

    enqueue = add_query

    def run(self) -> List[FetchResult]:
        """Run every queued query. Blocks until the queue is empty.

        Raises SymbolNotFound for a 404 and ProtocolError for any other failure.
        """
        return self.scheduler.run()

    run_all = run

    async def run_async(self) -> List[FetchResult]:
        return await self.scheduler.run_async()

    @staticmethod
    def quick_query(symbol: str, start: DateLike, end: DateLike, **kwargs) -> str:
        return quick_query(symbol, start, end, **kwargs)

    def _make_http_client(self) -> httpx.AsyncClient:
        limits = httpx.Limits(max_connections=self.concurrency_cap)
        return httpx.AsyncClient(
            timeout=self.timeout, limits=limits, transport=self._transport
        )


def quick_query(
    symbol: str,
    start: DateLike,
    end: DateLike,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    base_url: str = DEFAULT_BASE_URL,
) -> str:
    """One-off query returning the raw CSV body.

    Slower than queueing several queries on one HistoryClient and running
    them together.
    """
    client = HistoryClient(base_url=base_url, transport=transport)
    captured: List[str] = []
    client.add_query(symbol, start, end, captured.append)
    client.run()
    return captured[0]
