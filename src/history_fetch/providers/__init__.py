"""Request construction and response classification for the table endpoint."""

from .base import FetchResult, HistoryResponse, Query, RequestDescriptor
from .yahoo import DEFAULT_BASE_URL, build_request, classify

__all__ = [
    "DEFAULT_BASE_URL",
    "FetchResult",
    "HistoryResponse",
    "Query",
    "RequestDescriptor",
    "build_request",
    "classify",
]
