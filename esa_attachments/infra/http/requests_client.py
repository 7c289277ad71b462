"""requests-based HTTP client implementation.

Dependencies:
    - requests
"""

from __future__ import annotations

from contextlib import closing
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Mapping, Sequence

import requests

from esa_attachments.infra.http.client import (
    HttpDecodeError,
    HttpStatusError,
    HttpTransportError,
    MultipartField,
    RawResponse,
)

if TYPE_CHECKING:
    from esa_attachments.common.config import Settings


def status_text(status_code: int, reason: str | None = None) -> str:
    """Return the standard reason phrase for a status code."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return reason or "Unknown Status"


class RequestsHttpClient:
    """HTTP client backed by a shared ``requests.Session``.

    The esa.io bearer token is attached to API calls only. Multipart uploads
    go to a third-party object store and carry no credentials besides the
    signed form fields.
    """

    def __init__(
        self,
        *,
        settings: "Settings",
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._timeout = float(settings.ESA_HTTP_TIMEOUT_SECONDS)
        self._session = session or self._build_session(settings)

    @staticmethod
    def _build_session(settings: "Settings") -> requests.Session:
        session = requests.Session()
        session.headers["User-Agent"] = settings.ESA_USER_AGENT
        return session

    def _api_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._settings.ESA_ACCESS_TOKEN:
            headers["Authorization"] = f"Bearer {self._settings.ESA_ACCESS_TOKEN}"
        return headers

    def post_form(self, url: str, *, data: Mapping[str, str]) -> Any:
        """POST an URL-encoded form and decode the JSON response."""
        try:
            response = self._session.post(
                url,
                data=dict(data),
                headers=self._api_headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise HttpTransportError(f"POST {url} failed: {exc}") from exc

        with closing(response):
            if not 200 <= response.status_code < 300:
                raise HttpStatusError(
                    url=url,
                    status_code=response.status_code,
                    reason=status_text(response.status_code, response.reason),
                )
            try:
                return response.json()
            except ValueError as exc:
                raise HttpDecodeError(
                    f"Response from {url} is not valid JSON: {exc}"
                ) from exc

    def post_multipart(
        self, url: str, *, files: Sequence[MultipartField]
    ) -> RawResponse:
        """POST a multipart body and report the status as-is."""
        try:
            response = self._session.post(
                url,
                files=list(files),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise HttpTransportError(f"POST {url} failed: {exc}") from exc

        with closing(response):
            # Drain so the connection goes back to the pool.
            _ = response.content
            return RawResponse(
                url=url,
                status_code=response.status_code,
                reason=status_text(response.status_code, response.reason),
            )

    def close(self) -> None:
        self._session.close()
