#!/usr/bin/env python3
"""Upload local files as esa.io attachments and print their URLs.

Usage:
  .venv/bin/python scripts/upload_attachment.py --team docs screenshot.png
  ESA_TEAM=docs .venv/bin/python scripts/upload_attachment.py a.png b.pdf

Reads ESA_ACCESS_TOKEN (and optionally ESA_TEAM) from the environment or .env.
Stops at the first file that fails to upload.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from esa_attachments.common.config import Settings, get_settings
from esa_attachments.common.logging import setup_logging
from esa_attachments.services import AttachmentService, ServiceError

logger = logging.getLogger("esa_attachments.cli")


def main(
    argv: Sequence[str] | None = None,
    *,
    settings: Settings | None = None,
    service: AttachmentService | None = None,
) -> int:
    parser = argparse.ArgumentParser(description="Upload files as esa.io attachments")
    parser.add_argument(
        "--team",
        default=None,
        help="esa.io team name (default: ESA_TEAM)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every upload stage",
    )
    parser.add_argument("paths", nargs="+", metavar="PATH", help="Files to upload")
    args = parser.parse_args(argv)

    settings = settings or get_settings()
    setup_logging(
        "DEBUG" if args.verbose else settings.LOG_LEVEL,
        json_output=settings.LOG_JSON,
    )

    team = args.team or settings.ESA_TEAM
    if not team:
        parser.error("--team is required when ESA_TEAM is not set")

    try:
        service = service or AttachmentService(settings=settings)
        for path in args.paths:
            url = service.upload(team, path)
            logger.debug("uploaded %s -> %s", path, url)
            print(url)
    except ServiceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
