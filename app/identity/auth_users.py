"""
===============================================================================
CRC CARD: identity/auth_users.py
===============================================================================

Module:
    User Authentication (JWT)

Responsibilities:
    - Hash/verify passwords (Argon2).
    - Issue signed access tokens with expiry.
    - Decode and validate access tokens (signature, exp, minimal claims).
    - Resolve the current user (token -> user_id -> repository).
    - Expose FastAPI dependencies (require_user, require_roles).

Collaborators:
    - crosscutting.config.get_settings: secret and TTL.
    - crosscutting.error_responses: unauthorized / invalid_credential / forbidden.
    - crosscutting.logger: structured logging.
    - container.get_user_repository: user lookups.
    - identity.users: User / UserRole.

Notes:
    - Cryptography lives at the identity edge, never in the domain.
    - Minimal claims: sub, email, role, iat, exp, typ.
    - Never log secrets or tokens.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from fastapi import Header, Request

from ..container import get_user_repository
from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    forbidden,
    invalid_credential,
    unauthorized,
)
from ..crosscutting.logger import logger
from .users import User, UserRole

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_EMAIL: str = "email"
CLAIM_ROLE: str = "role"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_TYP: str = "typ"

TOKEN_TYPE_ACCESS: str = "access"

MSG_TOKEN_REQUIRED = "Access token required."
MSG_TOKEN_EXPIRED = "Token expired."
MSG_TOKEN_INVALID = "Invalid token."
MSG_USER_INACTIVE = "User account is inactive."

_password_hasher = PasswordHasher()


# ---------------------------------------------------------------------------
# Internal contracts
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """Auth settings snapshot."""

    jwt_secret: str
    jwt_access_ttl_minutes: int


@dataclass(frozen=True, slots=True)
class TokenPayload:
    """Minimal payload expected from an access token."""

    user_id: str
    email: str
    role: UserRole


def get_auth_settings() -> AuthSettings:
    s = get_settings()
    return AuthSettings(
        jwt_secret=s.jwt_secret,
        jwt_access_ttl_minutes=s.jwt_access_ttl_minutes,
    )


# ---------------------------------------------------------------------------
# Passwords (Argon2)
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def authenticate_user(email: str, password: str) -> User | None:
    """Check credentials and return the active user, or None.

    Security:
        - "Unknown user" and "wrong password" are indistinguishable (None).
        - An existing but inactive user with the right password gets 403.
    """
    normalized_email = normalize_email(email)
    if not normalized_email:
        return None

    user = get_user_repository().get_user_by_email(normalized_email)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    if not user.is_active:
        logger.warning("Auth failed: inactive user", extra={"user_id": str(user.id)})
        raise forbidden(MSG_USER_INACTIVE)

    return user


# ---------------------------------------------------------------------------
# JWT (issue / decode)
# ---------------------------------------------------------------------------


def create_access_token(
    user: User, settings: AuthSettings | None = None
) -> tuple[str, int]:
    """Create a signed access token.

    Returns:
        (token, expires_in_seconds)
    """
    auth_settings = settings or get_auth_settings()

    now = datetime.now(timezone.utc)
    expires_in = int(auth_settings.jwt_access_ttl_minutes * 60)

    payload: dict[str, object] = {
        CLAIM_SUB: str(user.id),
        CLAIM_EMAIL: user.email,
        CLAIM_ROLE: user.role.value,
        CLAIM_IAT: int(now.timestamp()),
        CLAIM_EXP: int((now + timedelta(seconds=expires_in)).timestamp()),
        CLAIM_TYP: TOKEN_TYPE_ACCESS,
    }

    token = jwt.encode(payload, auth_settings.jwt_secret, algorithm=JWT_ALGORITHM)
    return token, expires_in


def decode_access_token(
    token: str, settings: AuthSettings | None = None
) -> TokenPayload:
    """Decode and validate an access token.

    Errors (401 INVALID_CREDENTIAL):
        - expired token
        - bad signature / malformed token / missing claims
    """
    auth_settings = settings or get_auth_settings()

    try:
        payload = jwt.decode(
            token,
            auth_settings.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": [CLAIM_SUB, CLAIM_EMAIL, CLAIM_ROLE, CLAIM_EXP]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise invalid_credential(MSG_TOKEN_EXPIRED) from exc
    except jwt.InvalidTokenError as exc:
        raise invalid_credential(MSG_TOKEN_INVALID) from exc

    user_id = payload.get(CLAIM_SUB)
    email = payload.get(CLAIM_EMAIL)
    role_value = payload.get(CLAIM_ROLE)
    token_type = payload.get(CLAIM_TYP)

    if not user_id or not email or not role_value:
        raise invalid_credential(MSG_TOKEN_INVALID)

    if token_type is not None and token_type != TOKEN_TYPE_ACCESS:
        raise invalid_credential(MSG_TOKEN_INVALID)

    try:
        role = UserRole(str(role_value))
    except ValueError as exc:
        raise invalid_credential(MSG_TOKEN_INVALID) from exc

    return TokenPayload(user_id=str(user_id), email=str(email), role=role)


def get_current_user(token: str) -> User:
    """Resolve the current user from an access token."""
    payload = decode_access_token(token)

    try:
        user_id = UUID(payload.user_id)
    except ValueError as exc:
        raise invalid_credential(MSG_TOKEN_INVALID) from exc

    user = get_user_repository().get_user(user_id)
    if not user or not user.is_active:
        raise invalid_credential(MSG_TOKEN_INVALID)
    return user


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extract the token from `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------


def require_user() -> Callable:
    """Dependency: authenticated user (Bearer JWT)."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> User:
        token = _extract_bearer_token(authorization)
        if not token:
            raise unauthorized(MSG_TOKEN_REQUIRED)

        user = get_current_user(token)
        request.state.user = user
        return user

    return dependency


def require_roles(*roles: UserRole | str) -> Callable:
    """Dependency: authenticated user holding one of `roles`."""
    allowed = tuple(UserRole(r) for r in roles)
    message = "Access denied. Required roles: " + ", ".join(r.value for r in allowed)

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
    ) -> User:
        user = await require_user()(request, authorization)
        if user.role not in allowed:
            logger.warning(
                "Access denied: role not allowed",
                extra={"user_id": str(user.id), "role": user.role.value},
            )
            raise forbidden(message)
        return user

    return dependency
