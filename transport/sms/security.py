"""
SMS Webhook Signature Verification

SECURITY BOUNDARY - Verify the provider's HMAC-SHA1 request signature.
Pure functions. No env access. No network. No retries.
"""

import base64
import hashlib
import hmac
from typing import Mapping, Optional


def build_signing_string(url: str, params: Mapping[str, str]) -> str:
    """
    Build the string the provider signs.

    The full request URL, then every form field as key immediately followed
    by value, in submission order. No separators.
    """
    parts = [url]
    for key, value in params.items():
        parts.append(key)
        parts.append(value)
    return "".join(parts)


def compute_signature(secret: str, url: str, params: Mapping[str, str]) -> str:
    """
    Compute the expected signature for a request.

    Returns:
        base64(HMAC-SHA1(secret, signing_string))
    """
    digest = hmac.new(
        key=secret.encode("utf-8"),
        msg=build_signing_string(url, params).encode("utf-8"),
        digestmod=hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(
    secret: str,
    url: str,
    params: Mapping[str, str],
    provided_signature: Optional[str],
) -> bool:
    """
    Check a caller-supplied signature against the computed one.

    Exact match, no case or whitespace normalization.
    Mismatch returns False; this function never raises.
    An empty secret verifies nothing.
    """
    if not secret or not provided_signature:
        return False

    expected = compute_signature(secret, url, params)

    # compare_digest rejects non-ASCII str input with TypeError
    try:
        return hmac.compare_digest(expected, provided_signature)
    except TypeError:
        return False
