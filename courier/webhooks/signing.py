"""HMAC-SHA256 signing of event payloads.

The signature covers the exact bytes sent as the request body, so a
receiver verifies `X-Signature` against the raw body it was given.
"""

import hashlib
import hmac
import json
import re
from typing import Any

SIGNATURE_HEADER = "X-Signature"

# Unpaired UTF-16 surrogates; json.loads turns an escaped "\ud800" into one
_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


def canonical_json(payload: Any) -> str:
    """Serialize a payload to the compact JSON form that is signed and sent.

    Keys keep their insertion order; non-ASCII characters are emitted as-is.
    Lone surrogates have no UTF-8 form and are written as `\\udXXX` escapes,
    as JavaScript's JSON.stringify does.

    Raises:
        TypeError: If the payload is not JSON-serializable
        ValueError: If the payload holds NaN or an infinite float
    """
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    return _LONE_SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)


def sign_payload(payload: Any, secret: str) -> str:
    """Generate the hex HMAC-SHA256 signature of a payload.

    Args:
        payload: JSON-serializable value
        secret: Signing key

    Returns:
        64-character lowercase hex digest
    """
    return sign_body(canonical_json(payload), secret)


def sign_body(body: str | bytes, secret: str) -> str:
    """Generate the hex HMAC-SHA256 signature of an already serialized body."""
    if isinstance(body, str):
        body = body.encode()
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def verify_signature(body: str | bytes, signature: str, secret: str) -> bool:
    """Check an X-Signature header value against a raw request body.

    Uses a constant-time comparison.
    """
    expected = sign_body(body, secret)
    return hmac.compare_digest(expected, signature.strip().lower())


class WebhookSigner:
    """Signs payloads with the process-wide secret.

    Built once at startup from settings; the key is never rotated while
    the process runs.
    """

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("Webhook signing secret must not be empty")
        self._secret = secret

    def serialize(self, payload: Any) -> str:
        return canonical_json(payload)

    def sign(self, payload: Any) -> str:
        return sign_payload(payload, self._secret)

    def sign_body(self, body: str | bytes) -> str:
        return sign_body(body, self._secret)

    def verify(self, body: str | bytes, signature: str) -> bool:
        return verify_signature(body, signature, self._secret)

    def __repr__(self) -> str:
        return "WebhookSigner(secret=[REDACTED])"
