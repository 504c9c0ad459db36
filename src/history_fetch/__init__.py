"""history_fetch: concurrent downloads of historical Yahoo! Finance tables."""

from importlib.metadata import version as _version

from .client import HistoryClient, quick_query
from .errors import HistoryFetchError, ProtocolError, SymbolNotFound
from .providers import FetchResult

__all__ = [
    "FetchResult",
    "HistoryClient",
    "HistoryFetchError",
    "ProtocolError",
    "SymbolNotFound",
    "get_version",
    "quick_query",
]


def get_version() -> str:
    """Return the installed package version."""
    try:
        return _version("history-fetch")
    except Exception:  # pragma: no cover - fallback for editable installs
        return "0.0.0"
