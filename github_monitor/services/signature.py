"""GitHub webhook HMAC-SHA256 signature verification.

The signature is computed over the raw request body exactly as received.
Parsing and re-serialising the JSON first changes the bytes and breaks the
signature, so callers must pass the untouched body.
"""

from __future__ import annotations

import hashlib
import hmac

import structlog

logger = structlog.get_logger()

SIGNATURE_PREFIX = "sha256="


def compute_signature(body: bytes, secret: str) -> str:
    """Return the ``X-Hub-Signature-256`` value GitHub would send for *body*."""
    digest = hmac.new(secret.encode("utf-8"), msg=body, digestmod=hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(body: bytes | None, signature_header: str | None, secret: str) -> bool:
    """Check a webhook signature in constant time.

    Fails closed: a missing body, header or secret, or any error while
    computing the digest, is reported as an invalid signature.
    """
    if not body or not signature_header or not secret:
        return False
    try:
        expected = compute_signature(body, secret)
        return hmac.compare_digest(expected.encode("utf-8"), signature_header.encode("utf-8"))
    except Exception:
        logger.exception("signature_verification_error")
        return False
