"""HTTP layer: transport, endpoint wrappers and the GET response cache."""

from cordkit.http.cache import ResponseCache
from cordkit.http.client import HTTPClient
from cordkit.http.transport import Transport, extract_response_data

__all__ = ["HTTPClient", "ResponseCache", "Transport", "extract_response_data"]
