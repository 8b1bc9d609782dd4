import hashlib
from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def token_fingerprint(token: str) -> str:
    """Short stable identifier for a token, safe to put into logs."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]
