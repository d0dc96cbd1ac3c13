"""Access token state owned by a single client instance."""

import time
from dataclasses import dataclass
from typing import Optional


@dataclass
class TokenState:
    """Cached access token, its expiry and the authorization code it came from.

    ``expires_at`` is a POSIX timestamp; ``None`` means the token never
    expires. ``code`` is ``None`` for tokens that were set directly rather
    than obtained through an exchange.
    """

    access_token: Optional[str] = None
    expires_at: Optional[float] = None
    code: Optional[str] = None

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.expires_at is None:
            return False
        if now is None:
            now = time.time()
        return now > self.expires_at

    def is_valid_for(self, code: str, now: Optional[float] = None) -> bool:
        """True if the cached token can be reused for ``code`` without an exchange."""
        return bool(self.access_token) and self.code == code and not self.is_expired(now)

    def seconds_left(self, now: Optional[float] = None) -> Optional[float]:
        if self.expires_at is None:
            return None
        if now is None:
            now = time.time()
        return self.expires_at - now
