"""
Token Lifecycle Service

Issues, verifies, refreshes and revokes tokens, and handles signup and
login, for the auth service.

Token Model:
============
- Access token: short-lived (15 min), stateless, never stored
- Refresh token: long-lived (7 days), valid only while its row exists
  and has not expired

Refresh token states:

    Active --(expires_at passes)--> Expired --(presented)--> Revoked
    Active --(logout)-------------------------------------> Revoked

Revoked means the row is gone; there is no way back. Expiry is noticed
lazily, when the token is next presented, and the row is deleted then.

Refresh tokens are not rotated: a refresh returns a new access token and
the same refresh token stays valid until it expires or is revoked.
"""

import logging
from dataclasses import dataclass, field

from jose import JOSEError

from bookstore.models import User
from bookstore.models.user import Role
from bookstore.schemas import SignupRequest, TokenPair
from bookstore.services.credentials import CredentialStore
from bookstore.services.errors import Conflict, TokenGenerationError, Unauthorized
from bookstore.services.permissions import PermissionKey, PermissionResolver
from bookstore.services.security import (
    REFRESH_TOKEN_TYPE,
    ExpiredTokenError,
    InvalidTokenError,
    TokenSigner,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

REFRESH_FAILED = "Token refresh failed"
LOGOUT_SUCCESSFUL = "Logout successful"
ALREADY_INVALIDATED = "Refresh token is already invalidated or does not exist"


@dataclass(frozen=True)
class AccessClaims:
    """Verified identity carried by an access token."""

    user_id: str
    username: str
    email: str
    role: str
    permissions: frozenset[PermissionKey] = field(default_factory=frozenset)


class AccessVerifier:
    """
    Stateless access-token check.

    Needs only the signer and the permission table, so the gateway can
    authenticate requests without a database.
    """

    def __init__(self, signer: TokenSigner, resolver: PermissionResolver) -> None:
        self.signer = signer
        self.resolver = resolver

    def verify(self, token: str) -> AccessClaims:
        """
        Verify signature, issuer, expiry and token type.

        Raises:
            Unauthorized: On any verification failure
        """
        try:
            claims = self.signer.decode_access(token)
        except ExpiredTokenError:
            raise Unauthorized("Token expired")
        except InvalidTokenError as e:
            logger.info(f"Rejected access token: {e}")
            raise Unauthorized("Invalid token")

        user_id = claims.get("sub")
        if not user_id:
            raise Unauthorized("Invalid token")

        role = claims.get("role", "")
        return AccessClaims(
            user_id=str(user_id),
            username=claims.get("username", ""),
            email=claims.get("email", ""),
            role=role,
            permissions=self.resolver.resolve(role),
        )


class TokenLifecycleManager:
    """
    Signup, login and the refresh-token lifecycle.

    Example:
        manager = TokenLifecycleManager(SqlCredentialStore(db), signer, resolver)
        pair = manager.login("alice", "secret123")
        access = manager.refresh_access(pair.refresh_token)
        manager.revoke(pair.refresh_token)
    """

    def __init__(
        self,
        store: CredentialStore,
        signer: TokenSigner,
        resolver: PermissionResolver,
    ) -> None:
        self.store = store
        self.signer = signer
        self.verifier = AccessVerifier(signer, resolver)

    # ---------------------------------------------------------------------
    # Issuance
    # ---------------------------------------------------------------------
    def issue_token_pair(self, user: User) -> TokenPair:
        """
        Sign an access/refresh pair for a user and store the refresh row.

        Raises:
            TokenGenerationError: If signing fails
        """
        try:
            access_token = self.signer.sign_access({
                "sub": str(user.id),
                "username": user.name,
                "email": user.email,
                "role": user.role,
            })
            refresh_token, expires_at = self.signer.sign_refresh(user.id)
        except JOSEError as e:
            logger.error(f"Token generation failed for user {user.id}: {e}")
            raise TokenGenerationError("Token generation failed")

        self.store.add_refresh_token(
            token=refresh_token, user_id=user.id, expires_at=expires_at
        )
        logger.info(f"Issued token pair for user {user.id}")
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def verify_access(self, token: str) -> AccessClaims:
        return self.verifier.verify(token)

    # ---------------------------------------------------------------------
    # Refresh
    # ---------------------------------------------------------------------
    def refresh_access(self, refresh_token: str) -> str:
        """
        Exchange a refresh token for a new access token.

        Every failure surfaces as the same 401; the reason is only logged.

        Raises:
            Unauthorized: Token invalid, expired, revoked or orphaned
        """
        try:
            claims = self.signer.decode_refresh(refresh_token)
        except ExpiredTokenError:
            self.store.delete_refresh_token(refresh_token)
            logger.info("Refresh rejected: token expired, row deleted")
            raise Unauthorized(REFRESH_FAILED)
        except InvalidTokenError as e:
            logger.info(f"Refresh rejected: {e}")
            raise Unauthorized(REFRESH_FAILED)

        if claims.get("token_type") != REFRESH_TOKEN_TYPE:
            logger.info("Refresh rejected: wrong token type")
            raise Unauthorized(REFRESH_FAILED)

        row = self.store.get_refresh_token(refresh_token)
        if row is None:
            logger.info("Refresh rejected: token revoked or unknown")
            raise Unauthorized(REFRESH_FAILED)

        if row.is_expired(self.signer.now()):
            self.store.delete_refresh_token(refresh_token)
            logger.info(f"Refresh rejected: stored token for user {row.user_id} expired")
            raise Unauthorized(REFRESH_FAILED)

        user = self.store.get_user(row.user_id)
        if user is None:
            logger.warning(f"Refresh rejected: user {row.user_id} no longer exists")
            raise Unauthorized(REFRESH_FAILED)

        try:
            return self.signer.sign_access({
                "sub": str(user.id),
                "username": user.name,
                "email": user.email,
                "role": user.role,
            })
        except JOSEError as e:
            logger.error(f"Access token signing failed during refresh: {e}")
            raise Unauthorized(REFRESH_FAILED)

    # ---------------------------------------------------------------------
    # Revocation
    # ---------------------------------------------------------------------
    def revoke(self, refresh_token: str) -> str:
        """
        Delete a refresh token's row. Safe to call repeatedly.

        An expired but correctly signed token is still accepted here, so
        logging out with a stale token cleans its row up.

        Raises:
            Unauthorized: Token was not signed by us
        """
        try:
            self.signer.decode_refresh(refresh_token)
        except ExpiredTokenError:
            pass
        except InvalidTokenError as e:
            logger.info(f"Logout rejected: {e}")
            raise Unauthorized("Invalid refresh token")

        if self.store.delete_refresh_token(refresh_token):
            return LOGOUT_SUCCESSFUL
        return ALREADY_INVALIDATED

    # ---------------------------------------------------------------------
    # Signup / Login
    # ---------------------------------------------------------------------
    def signup(self, data: SignupRequest, role: Role) -> TokenPair:
        """
        Create a user with the given role and sign them in.

        Any role in the request body is ignored.

        Raises:
            Conflict: Name already taken
        """
        if self.store.get_user_by_name(data.name) is not None:
            raise Conflict("Username already exists")

        user = self.store.create_user(
            name=data.name,
            email=str(data.email),
            password_hash=hash_password(data.password),
            role=role.value,
        )
        logger.info(f"Signed up user {user.id} with role {user.role}")
        return self.issue_token_pair(user)

    def login(self, name: str, password: str) -> TokenPair:
        user = self.store.get_user_by_name(name)
        if user is None:
            raise Unauthorized("Invalid credentials")
        if not verify_password(password, user.password_hash):
            logger.info(f"Failed login for user {user.id}")
            raise Unauthorized("Invalid password")
        return self.issue_token_pair(user)
