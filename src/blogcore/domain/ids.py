"""Post ID generation.

Post IDs are random UUID4 strings (122 random bits), generated by the store
at creation time.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import uuid


def generate_post_id() -> str:
    """Generate a fresh post ID in canonical UUID4 form."""
    return str(uuid.uuid4())
