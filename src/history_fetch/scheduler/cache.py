"""Per-client memo of completed responses keyed by request URL."""

from __future__ import annotations

from typing import Dict, Optional

from ..providers.base import HistoryResponse


class ResponseCache:
    def __init__(self) -> None:
        self._responses: Dict[str, HistoryResponse] = {}

    def get(self, url: str) -> Optional[HistoryResponse]:
        return self._responses.get(url)

    def store(self, url: str, response: HistoryResponse) -> None:
        self._responses[url] = response

    def __contains__(self, url: object) -> bool:
        return url in self._responses

    def __len__(self) -> int:
        return len(self._responses)
