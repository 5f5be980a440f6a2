from __future__ import annotations
import base64
import hashlib

DIGEST_SIZE = 32


def B64(b: bytes) -> str:
    """Base64-encode bytes to ASCII string."""
    return base64.b64encode(b).decode("ascii")


def B64D(s: str) -> bytes:
    """Decode base64 ASCII string to bytes with strict validation."""
    try:
        return base64.b64decode(s.encode("ascii"), validate=True)
    except Exception as e:
        raise ValueError("invalid base64") from e


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def from_hex(s: str) -> bytes:
    """Decode a hex digest, tolerating an optional 0x prefix."""
    s = s.strip()
    if s[:2].lower() == "0x":
        s = s[2:]
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise ValueError(f"invalid hex digest: {s!r}") from e
