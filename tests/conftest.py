from __future__ import annotations

import pytest

from esa_attachments.common.config import Settings, get_settings

ESA_ENV_VARS = (
    "ESA_ACCESS_TOKEN",
    "ESA_API_BASE_URL",
    "ESA_TEAM",
    "ESA_HTTP_TIMEOUT_SECONDS",
    "ESA_USER_AGENT",
    "LOG_LEVEL",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep the developer's .env and ESA_* variables out of the tests."""
    for name in ESA_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        ESA_ACCESS_TOKEN="test-token",
        ESA_API_BASE_URL="https://api.esa.io/v1/teams",
        ESA_TEAM="acme",
    )


@pytest.fixture()
def hello_file(tmp_path):
    path = tmp_path / "hello.txt"
    path.write_bytes(b"hello esa\n")
    return path
