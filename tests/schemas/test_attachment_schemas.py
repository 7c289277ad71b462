"""Tests for the attachment policy schema."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from esa_attachments.schemas.attachments import UploadPolicy
from tests.services.mock_http import make_policy_payload


def test_parses_aliased_form_fields():
    policy = UploadPolicy.model_validate(make_policy_payload())

    assert policy.form.aws_access_key_id == "AKIAEXAMPLE"
    assert policy.form.content_type == "text/plain"
    assert policy.form.cache_control == "max-age=31536000"
    assert policy.form.content_disposition == 'inline; filename="hello.txt"'


def test_multipart_fields_use_wire_names_in_order():
    policy = UploadPolicy.model_validate(make_policy_payload())

    assert policy.form.multipart_fields() == [
        ("AWSAccessKeyId", "AKIAEXAMPLE"),
        ("signature", "sig=="),
        ("policy", "eyJleHBpcmF0aW9uIjoi"),
        ("key", "uploads/hello.txt"),
        ("Content-Type", "text/plain"),
        ("Cache-Control", "max-age=31536000"),
        ("Content-Disposition", 'inline; filename="hello.txt"'),
        ("acl", "public-read"),
    ]


def test_ignores_unknown_keys():
    payload = make_policy_payload()
    payload["attachment"]["expires_at"] = "2026-10-16T00:00:00Z"
    payload["form"]["x-amz-meta-team"] = "acme"

    policy = UploadPolicy.model_validate(payload)

    assert policy.attachment.url == "http://x/pub/hello.txt"


@pytest.mark.parametrize("section,key", [("attachment", "endpoint"), ("form", "acl")])
def test_missing_field_is_rejected(section, key):
    payload = make_policy_payload()
    del payload[section][key]

    with pytest.raises(ValidationError):
        UploadPolicy.model_validate(payload)


def test_policy_is_immutable():
    policy = UploadPolicy.model_validate(make_policy_payload())

    with pytest.raises(ValidationError):
        policy.form.key = "other"
