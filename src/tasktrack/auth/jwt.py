"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. A token
binds {sub: user id, role} to an issue time and an expiry, signed with
the server's symmetric secret (HS256 by default). Nothing is stored
server-side, so a token stays valid until it expires.

verify() distinguishes three failure modes for logging. Callers at the
HTTP boundary collapse all of them into a single 401.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt


class TokenError(Exception):
    """Raised when token verification fails."""

    reason = "invalid"


class MalformedToken(TokenError):
    reason = "malformed"


class SignatureInvalid(TokenError):
    reason = "signature_invalid"


class TokenExpired(TokenError):
    reason = "expired"


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    role: str


class TokenService:
    """Issues and verifies signed, time-bounded identity assertions."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=1),
    ):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(
        self,
        subject: str,
        role: str,
        ttl: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """Create a signed access token for `subject`."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(subject),
            "role": role,
            "iat": issued_at,
            "exp": issued_at + (ttl if ttl is not None else self.ttl),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Verify and decode a token.

        Returns the claims on success.
        Raises MalformedToken, SignatureInvalid or TokenExpired on failure.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired("Token has expired") from e
        # InvalidSignatureError subclasses DecodeError, so it goes first.
        except jwt.InvalidSignatureError as e:
            raise SignatureInvalid("Token signature is invalid") from e
        except jwt.InvalidTokenError as e:
            raise MalformedToken(f"Malformed token: {e}") from e

        subject = payload.get("sub")
        role = payload.get("role")
        if not isinstance(subject, str) or not subject:
            raise MalformedToken("Malformed token: empty subject")
        if not isinstance(role, str) or not role:
            raise MalformedToken("Malformed token: missing role")
        return TokenClaims(subject=subject, role=role)
