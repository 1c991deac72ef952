"""SHA-256 digests of compiled notes and assets for the publish ledger"""

import hashlib


def sha256(content: str | bytes) -> str:
    """Hex digest (64 chars, fits the String(64) ledger column); text is hashed as UTF-8."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()
