"""Short id generation utilities."""

import secrets
from typing import Optional


class ShortIdGenerator:
    """Generate random short ids for URLs."""

    def __init__(self, num_bytes: int = 4):
        """Initialize short id generator.

        Args:
            num_bytes: Random bytes per id; the id is twice as many hex chars
        """
        self.num_bytes = num_bytes

    def generate_random(self, num_bytes: Optional[int] = None) -> str:
        """Generate a random lowercase hex short id.

        Args:
            num_bytes: Random bytes to draw (uses default if not specified)

        Returns:
            Random short id, e.g. ``9f86d081`` for 4 bytes
        """
        return secrets.token_hex(num_bytes or self.num_bytes)
