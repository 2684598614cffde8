"""
Secret generation and signature validation tests.
"""

import hashlib
import hmac

from hubrelay.security import (
    generate_secret,
    generate_subscription_id,
    sign_payload,
    validate_signature,
)

BODY = b'{"data":[{"id":"1"}]}'


def test_generate_secret_is_random():
    secrets = {generate_secret() for _ in range(50)}

    assert len(secrets) == 50
    assert all(len(s) == 64 for s in secrets)


def test_generate_subscription_id_is_unique():
    assert generate_subscription_id() != generate_subscription_id()


def test_sign_payload_matches_hmac_sha256():
    expected = hmac.new(b"s3cret", BODY, hashlib.sha256).hexdigest()

    assert sign_payload("s3cret", BODY) == f"sha256={expected}"
    assert sign_payload("s3cret", BODY.decode()) == f"sha256={expected}"


def test_validate_signature_accepts_prefixed_and_bare_digest():
    signature = sign_payload("s3cret", BODY)

    assert validate_signature(signature, "s3cret", BODY)
    assert validate_signature(signature.upper().replace("SHA256=", "sha256="), "s3cret", BODY)
    assert validate_signature(signature.split("=", 1)[1], "s3cret", BODY)


def test_validate_signature_rejects_wrong_secret_or_body():
    signature = sign_payload("s3cret", BODY)

    assert not validate_signature(signature, "other", BODY)
    assert not validate_signature(signature, "s3cret", BODY + b" ")


def test_validate_signature_rejects_missing_or_foreign_algorithm():
    digest = sign_payload("s3cret", BODY).split("=", 1)[1]

    assert not validate_signature(None, "s3cret", BODY)
    assert not validate_signature("", "s3cret", BODY)
    assert not validate_signature(f"sha1={digest}", "s3cret", BODY)


def test_validate_signature_handles_non_ascii_input():
    assert not validate_signature("sha256=é", "s3cret", BODY)
