from .attachment_service import (
    AttachmentError,
    AttachmentService,
    FileError,
    FileMetadata,
    PolicyError,
    UploadError,
    UploadStage,
    build_upload_parts,
    detect_content_type,
    inspect_file,
)
from .base import BaseService, ClientNotConfiguredError, ServiceError

__all__ = [
    "AttachmentService",
    "AttachmentError",
    "FileError",
    "PolicyError",
    "UploadError",
    "UploadStage",
    "FileMetadata",
    "build_upload_parts",
    "detect_content_type",
    "inspect_file",
    "BaseService",
    "ServiceError",
    "ClientNotConfiguredError",
]
