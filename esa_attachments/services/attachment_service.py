"""Attachment service for uploading local files to esa.io.

An upload takes two requests: esa.io issues a signed presigned-POST policy for
the file, then the file is posted straight to the object store named in that
policy. The public URL returned by the policy is the result.

Files are read whole into memory; there is no streaming upload.
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Mapping

import filetype
from pydantic import ValidationError

from esa_attachments.common.config import Settings
from esa_attachments.infra.http.client import (
    HttpClient,
    HttpError,
    HttpStatusError,
    MultipartField,
)
from esa_attachments.schemas.attachments import UploadPolicy
from esa_attachments.services.base import BaseService, ServiceError

logger = logging.getLogger(__name__)

POLICY_PATH = "/attachments/policies"
# The object store answers a successful presigned POST with 204 No Content.
UPLOAD_SUCCESS_STATUS = 204
# Bytes inspected when sniffing the content type.
SNIFF_LENGTH = 512
DEFAULT_TEXT_TYPE = "text/plain; charset=utf-8"
DEFAULT_BINARY_TYPE = "application/octet-stream"

_BINARY_BYTES = frozenset(
    [*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)]
)
_LEADING_WHITESPACE = b"\t\n\x0c\r "
# Each prefix must be followed by a space or ">" and is matched case-insensitively.
_HTML_PREFIXES = (
    b"<!DOCTYPE HTML",
    b"<HTML",
    b"<HEAD",
    b"<SCRIPT",
    b"<IFRAME",
    b"<H1",
    b"<DIV",
    b"<FONT",
    b"<TABLE",
    b"<A",
    b"<STYLE",
    b"<TITLE",
    b"<B",
    b"<BODY",
    b"<BR",
    b"<P",
    b"<!--",
)
_BYTE_ORDER_MARKS = (
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", DEFAULT_TEXT_TYPE),
)


class UploadStage(str, enum.Enum):
    START = "start"
    INSPECTING = "inspecting"
    POLICY_REQUESTED = "policy_requested"
    UPLOADING = "uploading"
    DONE = "done"
    FAILED = "failed"


class AttachmentError(ServiceError):
    """Raised when an attachment upload fails at some stage.

    ``stage`` names the step that failed and ``context`` holds the inputs of
    that step (path, team, endpoint, ...).
    """

    stage: UploadStage = UploadStage.FAILED

    def __init__(self, message: str, *, context: Mapping[str, Any] | None = None):
        self.message = message
        self.context: dict[str, Any] = dict(context or {})
        super().__init__(f"{self.stage.value} failed: {message}")


class FileError(AttachmentError):
    """Raised when the local file cannot be read."""

    stage = UploadStage.INSPECTING


class PolicyError(AttachmentError):
    """Raised when esa.io does not issue a usable upload policy."""

    stage = UploadStage.POLICY_REQUESTED


class UploadError(AttachmentError):
    """Raised when the object store rejects or never receives the file."""

    stage = UploadStage.UPLOADING


@dataclass(frozen=True, slots=True)
class FileMetadata:
    """A file read into memory, with the facts reported to the policy API."""

    type: str
    name: str
    size: int
    content: bytes = field(repr=False)

    def as_form(self) -> dict[str, str]:
        return {"type": self.type, "name": self.name, "size": str(self.size)}


def detect_content_type(content: bytes) -> str:
    """Sniff a MIME type from the leading bytes of ``content``.

    Markup and byte-order marks are recognised first, then binary signatures
    via ``filetype``; anything else is plain text unless it holds control
    bytes.
    """
    head = content[:SNIFF_LENGTH]
    if not head:
        return DEFAULT_TEXT_TYPE

    markup = head.lstrip(_LEADING_WHITESPACE)
    for prefix in _HTML_PREFIXES:
        tail = markup[len(prefix) : len(prefix) + 1]
        if markup[: len(prefix)].upper() == prefix and tail in (b" ", b">"):
            return "text/html; charset=utf-8"
    if markup.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"
    for mark, mime in _BYTE_ORDER_MARKS:
        if head.startswith(mark):
            return mime

    kind = filetype.guess(head)
    if kind is not None:
        return kind.mime
    if any(byte in _BINARY_BYTES for byte in head):
        return DEFAULT_BINARY_TYPE
    return DEFAULT_TEXT_TYPE


def inspect_file(path: str | os.PathLike[str]) -> FileMetadata:
    """Read a file and derive its content type, base name and size.

    Raises:
        FileError: If the file cannot be opened or fully read.
    """
    path = os.fspath(path)
    try:
        with open(path, "rb") as fh:
            expected = os.fstat(fh.fileno()).st_size
            content = fh.read()
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise FileError(f"cannot read {path}: {reason}", context={"path": path}) from exc

    if len(content) < expected:
        raise FileError(
            f"short read on {path}: got {len(content)} of {expected} bytes",
            context={"path": path},
        )

    return FileMetadata(
        type=detect_content_type(content),
        name=os.path.basename(path),
        size=len(content),
        content=content,
    )


def build_upload_parts(
    policy: UploadPolicy, file_name: str, content: bytes
) -> list[MultipartField]:
    """Lay out the presigned-POST body: the signed fields, then the file."""
    parts: list[MultipartField] = [
        (name, (None, value)) for name, value in policy.form.multipart_fields()
    ]
    parts.append(("file", (file_name, content, DEFAULT_BINARY_TYPE)))
    return parts


class AttachmentService(BaseService):
    """Application service for esa.io attachment uploads.

    Each call is independent; the service keeps no state between uploads.
    """

    def __init__(
        self,
        *,
        http_client: HttpClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(http_client=http_client, settings=settings)

    def policy_url(self, team: str) -> str:
        return self._team_url(team, POLICY_PATH)

    def request_policy(self, team: str, metadata: FileMetadata) -> UploadPolicy:
        """Ask esa.io for a one-shot upload policy for ``metadata``.

        Args:
            team: esa.io team name.
            metadata: Facts about the file to upload.

        Returns:
            The policy exactly as issued by the server.

        Raises:
            PolicyError: On transport errors, non-2xx statuses, or a response
                that does not match the policy schema.
        """
        url = self.policy_url(team)
        form = metadata.as_form()
        context: dict[str, Any] = {"team": team, "url": url, **form}

        try:
            payload = self._http.post_form(url, data=form)
        except HttpStatusError as exc:
            context["status_code"] = exc.status_code
            raise PolicyError(
                f"policy request for team {team!r} returned "
                f"{exc.status_code} {exc.reason}",
                context=context,
            ) from exc
        except HttpError as exc:
            raise PolicyError(
                f"policy request for team {team!r} failed: {exc}", context=context
            ) from exc

        try:
            return UploadPolicy.model_validate(payload)
        except ValidationError as exc:
            raise PolicyError(
                f"unexpected policy response for team {team!r}: "
                f"{exc.error_count()} schema error(s)",
                context=context,
            ) from exc

    def execute_upload(
        self, policy: UploadPolicy, file_name: str, content: bytes
    ) -> str:
        """POST the file to the policy's endpoint and return its public URL.

        Raises:
            UploadError: If the request fails or the status is not 204.
        """
        endpoint = policy.attachment.endpoint
        context: dict[str, Any] = {"endpoint": endpoint, "name": file_name}

        try:
            response = self._http.post_multipart(
                endpoint, files=build_upload_parts(policy, file_name, content)
            )
        except HttpError as exc:
            raise UploadError(
                f"upload to {endpoint} failed: {exc}", context=context
            ) from exc

        if response.status_code != UPLOAD_SUCCESS_STATUS:
            context["status_code"] = response.status_code
            raise UploadError(
                f"upload to {endpoint} returned {response.status_code} "
                f"{response.reason}",
                context=context,
            )

        return policy.attachment.url

    def upload(self, team: str, path: str | os.PathLike[str]) -> str:
        """Upload the file at ``path`` to ``team`` and return its public URL.

        A new policy is requested for every call, so uploading the same file
        twice yields two attachments.

        Raises:
            FileError: If the file cannot be read.
            PolicyError: If no policy could be obtained.
            UploadError: If the object store did not accept the file.
        """
        path = os.fspath(path)
        stage = UploadStage.START
        try:
            stage = self._enter(UploadStage.INSPECTING, path=path)
            metadata = inspect_file(path)

            stage = self._enter(
                UploadStage.POLICY_REQUESTED,
                team=team,
                name=metadata.name,
                size=metadata.size,
            )
            policy = self.request_policy(team, metadata)

            stage = self._enter(
                UploadStage.UPLOADING, endpoint=policy.attachment.endpoint
            )
            url = self.execute_upload(policy, metadata.name, metadata.content)
        except AttachmentError as exc:
            exc.context.setdefault("team", team)
            exc.context.setdefault("path", path)
            self._enter(UploadStage.FAILED, failed_stage=stage.value)
            raise

        self._enter(UploadStage.DONE)
        logger.info(
            "attachment_uploaded",
            extra={
                "extra": {
                    "team": team,
                    "name": metadata.name,
                    "size": metadata.size,
                    "type": metadata.type,
                    "url": url,
                }
            },
        )
        return url

    @staticmethod
    def _enter(stage: UploadStage, **fields: Any) -> UploadStage:
        logger.debug(
            "upload_stage",
            extra={"extra": {"stage": stage.value, **fields}},
        )
        return stage
