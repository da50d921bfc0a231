"""JWT token issuance and verification.

Tokens are stateless: {sub, iat, exp} signed with the process-wide secret.
Nothing is stored server-side; a token is good until exp and there is no
revocation.

verify() returns a TokenVerification instead of raising so callers can
branch on the outcome. The clock is injectable, which is what lets the
tests pin expiry boundaries exactly.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of verifying a token: a subject, or the reason it was rejected."""

    subject: Optional[str] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.subject is not None

    @classmethod
    def rejected(cls, reason: str) -> "TokenVerification":
        return cls(reason=reason)


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens."""

    def __init__(
        self,
        secret: str,
        ttl: timedelta,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.secret = secret
        self.ttl = ttl
        self.algorithm = algorithm
        self.clock = clock

    def issue(self, subject_id: str) -> str:
        """Create a token whose subject is subject_id, expiring now + ttl."""
        # NumericDate may be fractional; truncating would end the window early.
        issued_at = self.clock()
        payload = {
            "sub": subject_id,
            "iat": issued_at.timestamp(),
            "exp": (issued_at + self.ttl).timestamp(),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenVerification:
        """Check signature, structure and expiry against our own clock."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                # Expiry is checked below against self.clock, not wall time.
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "exp"],
                },
            )
        except jwt.InvalidTokenError as e:
            return TokenVerification.rejected(f"Invalid token: {e}")

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            return TokenVerification.rejected("Invalid token: missing subject")

        exp = payload["exp"]
        if not isinstance(exp, (int, float)):
            return TokenVerification.rejected("Invalid token: malformed expiry")
        if self.clock().timestamp() >= exp:
            return TokenVerification.rejected("Token has expired")

        return TokenVerification(subject=subject)
