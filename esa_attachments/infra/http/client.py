"""HTTP client protocol and data types.

This module defines the interface the attachment flow needs from an HTTP
client: a form POST that decodes a JSON answer, and a raw multipart POST that
reports the status code without interpreting it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence


class HttpError(RuntimeError):
    """Raised when an HTTP exchange fails."""


class HttpTransportError(HttpError):
    """Raised when the request never produced a response."""


class HttpStatusError(HttpError):
    """Raised when the server answered with a non-success status."""

    def __init__(self, *, url: str, status_code: int, reason: str) -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"{status_code} {reason} from {url}")


class HttpDecodeError(HttpError):
    """Raised when a response body is not valid JSON."""


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Status of a raw POST; the body has already been released."""

    url: str
    status_code: int
    reason: str


# (field name, (file name or None, value, optional content type))
MultipartField = tuple[str, tuple[Any, ...]]


class HttpClient(Protocol):
    """Protocol for the HTTP backend used by the attachment service."""

    def post_form(self, url: str, *, data: Mapping[str, str]) -> Any:
        """POST an URL-encoded form and decode the JSON response.

        Args:
            url: Absolute request URL.
            data: Form values, encoded as ``application/x-www-form-urlencoded``.

        Returns:
            The decoded JSON document.

        Raises:
            HttpTransportError: If the request could not be sent.
            HttpStatusError: If the status is not 2xx.
            HttpDecodeError: If the body is not JSON.
        """
        ...

    def post_multipart(
        self, url: str, *, files: Sequence[MultipartField]
    ) -> RawResponse:
        """POST a ``multipart/form-data`` body without checking the status.

        Args:
            url: Absolute request URL.
            files: Ordered parts; text parts use ``None`` as file name.

        Returns:
            RawResponse with the status code and reason phrase.

        Raises:
            HttpTransportError: If the request could not be sent.
        """
        ...
