"""
Security Service

Password hashing and JWT signing.

Security Features:
==================
1. Password hashing with bcrypt (passlib)
2. Access and refresh tokens signed with two different secrets, so a
   refresh token can never pass as an access token (and vice versa)
3. Every token carries and is checked against the configured issuer

Usage:
    from bookstore.services.security import TokenSigner, hash_password

    signer = TokenSigner.from_settings(get_settings())
    token = signer.sign_access({"sub": "1", "role": "admin"})
    claims = signer.decode_access(token)
"""

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from bookstore.config import Settings

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hashed = hash_password("SecurePass123")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a bcrypt hash.

    Uses constant-time comparison to prevent timing attacks.
    """
    return pwd_context.verify(plain_password, hashed_password)


def utc_now() -> datetime:
    return datetime.now(UTC)


# -------------------------------------------------------------------------
# Token errors
# -------------------------------------------------------------------------
class InvalidTokenError(Exception):
    """Signature, issuer or claim check failed."""


class ExpiredTokenError(InvalidTokenError):
    """
    Correctly signed token whose exp claim has passed.

    The signature is verified before the expiry, so a token raising this
    was issued by us.
    """


class TokenSigner:
    """
    Signs and verifies access and refresh tokens.

    Access claims are whatever the caller passes (user id, username,
    email, role) plus type, issuer, issued-at and expiry. Refresh claims
    are the user id, token_type="refresh" and a random jti so that two
    refresh tokens issued in the same second still differ.
    """

    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        issuer: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self.issuer = issuer
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.algorithm = algorithm
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenSigner":
        return cls(
            access_secret=settings.jwt_access_secret,
            refresh_secret=settings.jwt_refresh_secret,
            issuer=settings.jwt_issuer,
            access_ttl=timedelta(minutes=settings.access_token_expire_minutes),
            refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
            algorithm=settings.jwt_algorithm,
        )

    def now(self) -> datetime:
        return self._clock()

    # ---------------------------------------------------------------------
    # Signing
    # ---------------------------------------------------------------------
    def sign_access(self, claims: dict[str, Any]) -> str:
        """
        Sign an access token.

        Raises:
            JWTError: If encoding fails
        """
        issued_at = self.now()
        to_encode = claims.copy()
        to_encode.update({
            "type": ACCESS_TOKEN_TYPE,
            "iss": self.issuer,
            "iat": issued_at,
            "exp": issued_at + self.access_ttl,
        })
        return jwt.encode(to_encode, self._access_secret, algorithm=self.algorithm)

    def sign_refresh(self, user_id: int) -> tuple[str, datetime]:
        """
        Sign a refresh token.

        Returns:
            The token and the moment it expires (to be stored with it)
        """
        issued_at = self.now()
        expires_at = issued_at + self.refresh_ttl
        to_encode = {
            "sub": str(user_id),
            "token_type": REFRESH_TOKEN_TYPE,
            "jti": uuid.uuid4().hex,
            "iss": self.issuer,
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(to_encode, self._refresh_secret, algorithm=self.algorithm)
        return token, expires_at

    # ---------------------------------------------------------------------
    # Verification
    # ---------------------------------------------------------------------
    def decode_access(self, token: str) -> dict[str, Any]:
        """
        Verify an access token and return its claims.

        Raises:
            ExpiredTokenError: Signature fine, exp passed
            InvalidTokenError: Anything else wrong with the token
        """
        claims = self._decode(token, self._access_secret)
        if claims.get("type") != ACCESS_TOKEN_TYPE:
            raise InvalidTokenError("Invalid token type")
        return claims

    def decode_refresh(self, token: str) -> dict[str, Any]:
        """
        Verify a refresh token's signature, issuer and expiry.

        The token_type claim is left to the caller.
        """
        return self._decode(token, self._refresh_secret)

    def _decode(self, token: str, secret: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
            )
        except ExpiredSignatureError as e:
            raise ExpiredTokenError(str(e)) from e
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e
