from __future__ import annotations

from esa_attachments.common.config import Settings, get_settings
from esa_attachments.infra.http.client import HttpClient


class ServiceError(Exception):
    """Base class for application service level exceptions."""


class ClientNotConfiguredError(ServiceError):
    """Raised when no HTTP client can be built for a service."""


class BaseService:
    """Holds the HTTP client and settings shared by application services."""

    def __init__(
        self,
        *,
        http_client: HttpClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._http = http_client or self._build_http_client(self._settings)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def http(self) -> HttpClient:
        return self._http

    @staticmethod
    def _build_http_client(settings: Settings) -> HttpClient:
        if not settings.ESA_ACCESS_TOKEN:
            raise ClientNotConfiguredError(
                "ESA_ACCESS_TOKEN is required to call the esa.io API"
            )
        from esa_attachments.infra.http.requests_client import RequestsHttpClient

        return RequestsHttpClient(settings=settings)

    def _team_url(self, team: str, path: str) -> str:
        return f"{self._settings.ESA_API_BASE_URL}/{team}{path}"
