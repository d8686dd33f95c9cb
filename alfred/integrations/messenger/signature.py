from __future__ import annotations

import hashlib
import hmac

_ALGORITHMS = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
}


class WebhookSignatureError(ValueError):
    pass


def compute_signature(raw_body: bytes, secret: str, algorithm: str = "sha1") -> str:
    digest = _ALGORITHMS[algorithm]
    return hmac.new(secret.encode("utf-8"), raw_body, digest).hexdigest()


def verify_signature(raw_body: bytes, header_value: str, secret: str) -> None:
    """Check an `X-Hub-Signature` style header (`<algo>=<hexdigest>`)."""
    method, _, signature_hash = str(header_value or "").strip().partition("=")
    algorithm = method.strip().lower()
    if algorithm not in _ALGORITHMS or not signature_hash:
        raise WebhookSignatureError(f"unsupported signature format method={method or 'none'}")
    expected = compute_signature(raw_body, secret, algorithm)
    if not hmac.compare_digest(expected, signature_hash.strip().lower()):
        raise WebhookSignatureError("Couldn't validate the request signature.")
