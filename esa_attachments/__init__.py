"""Upload local files as esa.io attachments."""

from esa_attachments.schemas.attachments import UploadPolicy
from esa_attachments.services import (
    AttachmentError,
    AttachmentService,
    FileError,
    FileMetadata,
    PolicyError,
    UploadError,
)

__version__ = "0.1.0"

__all__ = [
    "AttachmentService",
    "AttachmentError",
    "FileError",
    "PolicyError",
    "UploadError",
    "FileMetadata",
    "UploadPolicy",
]
