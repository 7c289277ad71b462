from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from esa_attachments.services import AttachmentService, FileError
from scripts.upload_attachment import main
from tests.services.mock_http import MockHttpClient


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    previous_level, previous_handlers = root.level, list(root.handlers)
    yield
    root.handlers[:] = previous_handlers
    root.setLevel(previous_level)


def test_prints_urls_in_order(settings, capsys):
    service = MagicMock(spec=AttachmentService)
    service.upload.side_effect = ["http://x/pub/a.png", "http://x/pub/b.pdf"]

    code = main(["a.png", "b.pdf"], settings=settings, service=service)

    assert code == 0
    assert capsys.readouterr().out.splitlines() == [
        "http://x/pub/a.png",
        "http://x/pub/b.pdf",
    ]
    assert [c.args for c in service.upload.call_args_list] == [
        ("acme", "a.png"),
        ("acme", "b.pdf"),
    ]


def test_team_flag_overrides_settings(settings):
    service = MagicMock(spec=AttachmentService)
    service.upload.return_value = "http://x/pub/a.png"

    main(["--team", "docs", "a.png"], settings=settings, service=service)

    service.upload.assert_called_once_with("docs", "a.png")


def test_stops_at_first_failure(settings, capsys):
    service = MagicMock(spec=AttachmentService)
    service.upload.side_effect = FileError("cannot read a.png: No such file or directory")

    code = main(["a.png", "b.pdf"], settings=settings, service=service)

    assert code == 1
    err = capsys.readouterr().err
    assert "error: inspecting failed: cannot read a.png" in err
    service.upload.assert_called_once()


def test_missing_team_exits_with_usage_error(settings):
    settings.ESA_TEAM = None

    with pytest.raises(SystemExit) as exc_info:
        main(["a.png"], settings=settings, service=MagicMock())

    assert exc_info.value.code == 2


def test_missing_token_is_reported(settings, capsys, hello_file):
    settings.ESA_ACCESS_TOKEN = None

    code = main([str(hello_file)], settings=settings)

    assert code == 1
    assert "ESA_ACCESS_TOKEN" in capsys.readouterr().err


def test_uploads_real_file_through_service(settings, capsys, hello_file):
    service = AttachmentService(http_client=MockHttpClient(), settings=settings)

    code = main([str(hello_file)], settings=settings, service=service)

    assert code == 0
    assert capsys.readouterr().out.strip() == "http://x/pub/hello.txt"
