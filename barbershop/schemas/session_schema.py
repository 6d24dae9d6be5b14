"""Per-client session state."""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class SessionData:
    """
    Credentials and identifiers a signed-in customer carries between requests.

    Every request reads the bearer token from here; booking creation also
    reads the Square customer id.
    """
    token: Optional[str] = None
    square_customer_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> "SessionData":
        """Build a session from API_TOKEN and SQUARE_CUSTOMER_ID."""
        return cls(
            token=os.getenv("API_TOKEN") or None,
            square_customer_id=os.getenv("SQUARE_CUSTOMER_ID") or None,
        )
