"""Deferred request queue drained by a bounded pool of asyncio workers."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Tuple

import httpx

from ..errors import ProtocolError
from ..providers.base import FetchResult, HistoryResponse, RequestDescriptor, Success
from ..providers.yahoo import classify
from .cache import ResponseCache

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], httpx.AsyncClient]


class BatchScheduler:
    """Run queued requests with at most ``concurrency_cap`` in flight.

    Requests are admitted in enqueue order. Each completion is classified
    inside its worker; successes fire the query callback, the first failure
    aborts the batch: in-flight requests are cancelled, pending ones are
    dropped and the error is raised from :meth:`run`.
    """

    def __init__(
        self,
        concurrency_cap: int,
        client_factory: ClientFactory,
        cache: Optional[ResponseCache] = None,
    ):
        if concurrency_cap < 1:
            raise ValueError(f"concurrency_cap must be >= 1, got {concurrency_cap}")
        self.concurrency_cap = concurrency_cap
        self.cache = cache
        self._client_factory = client_factory
        self._pending: Deque[Tuple[int, RequestDescriptor]] = deque()
        self._sequence = itertools.count()
        self._in_flight = 0
        self._shared: Dict[str, asyncio.Future] = {}
        self.peak_in_flight = 0
        self._failed = False
        self._dropped = 0

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def enqueue(self, descriptor: RequestDescriptor) -> None:
        self._pending.append((next(self._sequence), descriptor))
        logger.debug("Queued %s", descriptor.url)

    def run(self) -> List[FetchResult]:
        """Blocking drain of the queue. Returns results in enqueue order."""
        if not self._pending:
            return []
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError("run() called from a running event loop; await run_async() instead")
        return asyncio.run(self.run_async())

    async def run_async(self) -> List[FetchResult]:
        if not self._pending:
            return []
        batch_size = len(self._pending)
        self.peak_in_flight = 0
        self._shared = {}
        self._failed = False
        self._dropped = 0
        collected: List[Tuple[int, FetchResult]] = []
        logger.info(
            "Running %d request(s) with concurrency %d", batch_size, self.concurrency_cap
        )
        async with self._client_factory() as client:
            workers = [
                asyncio.create_task(self._worker(client, collected))
                for _ in range(min(self.concurrency_cap, batch_size))
            ]
            try:
                await asyncio.gather(*workers)
            except BaseException:
                self._abandon(workers)
                raise
            finally:
                for task in workers:
                    task.cancel()
                await asyncio.gather(*workers, return_exceptions=True)
        collected.sort(key=lambda item: item[0])
        logger.info("Batch complete: %d request(s) succeeded", len(collected))
        return [result for _, result in collected]

    def _stop_admission(self) -> None:
        if self._failed:
            return
        self._failed = True
        self._dropped = len(self._pending)
        self._pending.clear()

    def _abandon(self, workers: List[asyncio.Task]) -> None:
        self._stop_admission()
        cancelled = sum(1 for task in workers if not task.done())
        if self._dropped or cancelled:
            logger.warning(
                "Batch aborted: %d in-flight request(s) cancelled, %d pending request(s) dropped",
                cancelled,
                self._dropped,
            )

    async def _worker(
        self, client: httpx.AsyncClient, collected: List[Tuple[int, FetchResult]]
    ) -> None:
        while self._pending and not self._failed:
            seq, descriptor = self._pending.popleft()
            self._in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self._in_flight)
            logger.debug("Admitted %s (%d in flight)", descriptor.url, self._in_flight)
            try:
                try:
                    response = await self._fetch(client, descriptor)
                finally:
                    self._in_flight -= 1
                logger.debug("Completed %s with status %d", descriptor.url, response.status_code)
                outcome = classify(response, descriptor)
                if not isinstance(outcome, Success):
                    raise outcome.to_error()
            except Exception:
                self._stop_admission()
                raise
            # Another worker failed while this request was in flight.
            if self._failed:
                return
            callback = descriptor.query.on_success
            if callback is not None:
                callback(outcome.body)
            collected.append((seq, FetchResult(query=descriptor.query, url=descriptor.url, body=outcome.body)))

    async def _fetch(self, client: httpx.AsyncClient, descriptor: RequestDescriptor) -> HistoryResponse:
        if self.cache is None:
            return await self._send(client, descriptor)
        url = descriptor.url
        cached = self.cache.get(url)
        if cached is not None:
            logger.debug("Cache hit for %s", url)
            return cached
        shared = self._shared.get(url)
        if shared is not None:
            logger.debug("Waiting on in-flight duplicate of %s", url)
            return await asyncio.shield(shared)
        future = asyncio.get_running_loop().create_future()
        self._shared[url] = future
        try:
            response = await self._send(client, descriptor)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # Mark retrieved; there may be no duplicate waiting on it.
            future.exception()
            raise
        finally:
            self._shared.pop(url, None)
        self.cache.store(url, response)
        future.set_result(response)
        return response

    async def _send(self, client: httpx.AsyncClient, descriptor: RequestDescriptor) -> HistoryResponse:
        try:
            response = await client.request(descriptor.method, descriptor.url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ProtocolError(
                f"Error communicating with Yahoo. URL: {descriptor.url}. {exc!r}",
                url=descriptor.url,
            ) from exc
        return HistoryResponse(status_code=response.status_code, body=response.text)
