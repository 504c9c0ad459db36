import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

CSV_BODY = (
    "Date,Open,High,Low,Close,Volume,Adj Close\n"
    "2009-12-31,213.33,213.38,210.00,210.73,12583400,210.73\n"
    "2009-12-30,210.97,213.94,210.51,211.64,14707900,211.64\n"
)

ENV_VARS = (
    "HISTORY_FETCH_CONCURRENCY",
    "HISTORY_FETCH_MEMOIZE",
    "HISTORY_FETCH_BASE_URL",
    "HISTORY_FETCH_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def csv_body():
    return CSV_BODY


class StubTransport:
    """Answer requests by symbol and remember every URL requested."""

    def __init__(self, responses=None, default=(200, CSV_BODY)):
        self.responses = responses or {}
        self.default = default
        self.requests: list[httpx.URL] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request.url)
        status, body = self.responses.get(request.url.params["s"], self.default)
        return httpx.Response(status, text=body)

    @property
    def symbols(self) -> list[str]:
        return [url.params["s"] for url in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture()
def stub():
    return StubTransport()
