import hashlib
import hmac
import secrets
import uuid
from typing import Optional, Union

SIGNATURE_ALGORITHM = "sha256"


def generate_secret() -> str:
    return secrets.token_hex(32)


def generate_subscription_id() -> str:
    return str(uuid.uuid4())


def _to_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode() if isinstance(value, str) else value


def sign_payload(secret: str, payload: Union[str, bytes]) -> str:
    """Return the x-hub-signature header value for payload"""
    digest = hmac.new(
        secret.encode(),
        _to_bytes(payload),
        hashlib.sha256
    ).hexdigest()
    return f"{SIGNATURE_ALGORITHM}={digest}"


def validate_signature(signature: Optional[str], secret: str, payload: Union[str, bytes]) -> bool:
    """
    Check a hub signature against the payload.

    Accepts "sha256=<hex>" as sent by the hub, or a bare hex digest.
    """
    if not signature:
        return False
    algorithm, sep, digest = signature.partition("=")
    if not sep:
        digest = algorithm
    elif algorithm.lower() != SIGNATURE_ALGORITHM:
        return False
    expected = sign_payload(secret, payload).partition("=")[2]
    return hmac.compare_digest(expected.encode(), digest.strip().lower().encode())
