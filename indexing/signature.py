"""Shopify webhook HMAC verification."""

import base64
import hashlib
import hmac


def sign(secret: str, raw_body: bytes) -> str:
    """Base64 HMAC-SHA256 of the raw body, as Shopify sends it."""
    digest = hmac.new(secret.encode(), raw_body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def verify(secret: str | None, raw_body: bytes, provided: str | None) -> bool:
    """Constant-time check of ``X-Shopify-Hmac-Sha256`` against the body.

    Fails closed: no secret or no header means unauthenticated.
    """
    if not secret or not provided:
        return False
    expected = sign(secret, raw_body).encode()
    return hmac.compare_digest(expected, provided.encode())
