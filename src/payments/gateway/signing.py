"""HMAC-SHA512 signing of webhook bodies.

The signature covers the exact bytes received. Re-serialized JSON is never
signed or verified.
"""

import hashlib
import hmac


def sign_payload(secret: str, raw_body: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha512).hexdigest()


def signature_matches(secret: str, raw_body: bytes, signature: str | None) -> bool:
    if not secret or not signature:
        return False
    expected = sign_payload(secret, raw_body)
    try:
        return hmac.compare_digest(expected, signature.strip().lower())
    except TypeError:
        # non-ASCII signature header
        return False
