"""Identifier generation for stored records."""

import hashlib
import secrets
from datetime import datetime, timezone


def generate_id() -> str:
    """
    Return a fresh version-4 style identifier.

    The token is a SHA-256 digest of the current UTC timestamp and 32 random
    bytes, laid out as ``xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx`` with ``y`` in
    ``{8, 9, a, b}``. Existing keys are not checked for collisions.
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    seed = timestamp + secrets.token_bytes(32).hex()
    digest = hashlib.sha256(seed.encode()).digest()
    hex_digest = digest.hex()

    variant = (digest[8] & 0x3F) | 0x80
    return "-".join(
        (
            hex_digest[0:8],
            hex_digest[8:12],
            "4" + hex_digest[13:16],
            f"{variant:02x}{hex_digest[18:20]}",
            hex_digest[20:32],
        )
    )
