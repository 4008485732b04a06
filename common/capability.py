"""Path-bound capability tokens: HMAC-SHA256(secret, canonical_path)."""

import base64
import hashlib
import hmac
from typing import Optional

from common.constants import DEFAULT_TOKEN_ENCODING, TOKEN_ENCODINGS


def _digest(secret: str, path: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), path.encode("utf-8"), hashlib.sha256).digest()


def sign_path(secret: str, path: str, encoding: str = DEFAULT_TOKEN_ENCODING) -> str:
    """
    Compute the capability token for a canonical path.

    Args:
        secret: Shared secret known to client and server
        path: Canonical (normalized, prefix-free) path
        encoding: "hex" (default) or "base64"

    Returns:
        Encoded token string

    Raises:
        ValueError: If the encoding is not supported
    """
    if encoding not in TOKEN_ENCODINGS:
        raise ValueError(f"Unsupported token encoding: {encoding}")

    digest = _digest(secret, path)
    if encoding == "base64":
        return base64.b64encode(digest).decode("ascii")
    return digest.hex()


def verify_path_token(secret: str, path: str, token: Optional[str]) -> bool:
    """
    Verify a capability token against a canonical path.

    Both hex and base64 encodings are accepted. The comparison uses
    hmac.compare_digest.

    Args:
        secret: Shared secret
        path: Canonical path the token must be bound to
        token: Token presented by the caller (None when absent)

    Returns:
        True if the token authorizes the path, False otherwise
    """
    if not token:
        return False

    expected = _digest(secret, path)
    candidates = (expected.hex(), base64.b64encode(expected).decode("ascii"))
    return any(hmac.compare_digest(token.encode("utf-8"), c.encode("ascii")) for c in candidates)
