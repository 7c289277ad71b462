"""HTTP transport abstraction layer.

This module provides a protocol-based abstraction over the HTTP client so the
attachment flow can be exercised against in-memory fakes.
"""

from .client import (
    HttpClient,
    HttpDecodeError,
    HttpError,
    HttpStatusError,
    HttpTransportError,
    MultipartField,
    RawResponse,
)

__all__ = [
    "HttpClient",
    "HttpDecodeError",
    "HttpError",
    "HttpStatusError",
    "HttpTransportError",
    "MultipartField",
    "RawResponse",
]
