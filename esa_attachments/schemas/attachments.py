"""Pydantic schemas for the esa.io attachment policy API.

The policy endpoint is a beta feature without published documentation, so
every field is required and a missing one is reported instead of defaulted.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AttachmentValue(BaseModel):
    """Where to upload, and where the attachment will be served from."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    endpoint: str
    url: str


class FormValue(BaseModel):
    """Signed presigned-POST fields issued by the policy endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    aws_access_key_id: str = Field(alias="AWSAccessKeyId")
    signature: str
    policy: str
    key: str
    content_type: str = Field(alias="Content-Type")
    cache_control: str = Field(alias="Cache-Control")
    content_disposition: str = Field(alias="Content-Disposition")
    acl: str

    def multipart_fields(self) -> list[tuple[str, str]]:
        """Form fields in the order the object store expects them."""
        return [
            ("AWSAccessKeyId", self.aws_access_key_id),
            ("signature", self.signature),
            ("policy", self.policy),
            ("key", self.key),
            ("Content-Type", self.content_type),
            ("Cache-Control", self.cache_control),
            ("Content-Disposition", self.content_disposition),
            ("acl", self.acl),
        ]


class UploadPolicy(BaseModel):
    """Response of ``POST /teams/:team/attachments/policies``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    attachment: AttachmentValue
    form: FormValue
