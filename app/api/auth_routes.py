"""
===============================================================================
CRC CARD: app/api/auth_routes.py (authentication and user directory)
===============================================================================

Responsibilities:
  - Login / self-registration returning a JWT access token.
  - Current user (/auth/me).
  - Active user directory for assignee pickers (admin, manager).

Collaborators:
  - identity.auth_users: authenticate_user, create_access_token, hash_password,
    require_user, require_roles
  - container.get_user_repository
  - crosscutting.error_responses: RFC7807 factories
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..container import get_user_repository
from ..crosscutting.error_responses import (
    OPENAPI_ERROR_RESPONSES,
    conflict,
    invalid_credential,
)
from ..crosscutting.exceptions import DuplicateEmailError
from ..crosscutting.logger import logger
from ..domain.repositories import UserRepository
from ..identity.auth_users import (
    authenticate_user,
    create_access_token,
    hash_password,
    normalize_email,
    require_roles,
    require_user,
)
from ..identity.users import User, UserRole

router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# HTTP models (DTOs)
# -----------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=512)

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        return normalize_email(v)


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^\S+@\S+\.\S+$")
    password: str = Field(..., min_length=6, max_length=512)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be 2-50 characters")
        return v

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        return normalize_email(v)


class UserResponse(_CamelModel):
    id: UUID
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime | None


class TokenResponse(_CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class UsersListResponse(_CamelModel):
    users: list[UserResponse]


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        is_active=user.is_active,
        created_at=user.created_at,
    )


def _token_response(user: User) -> TokenResponse:
    token, expires_in = create_access_token(user)
    return TokenResponse(
        access_token=token,
        expires_in=expires_in,
        user=_to_user_response(user),
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post("/auth/login", response_model=TokenResponse, tags=["auth"])
def login(req: LoginRequest):
    """Authenticate and return an access token."""
    user = authenticate_user(req.email, req.password)
    if not user:
        logger.info("Login failed")
        raise invalid_credential("Invalid credentials.")

    logger.info("Login succeeded", extra={"user_id": str(user.id)})
    return _token_response(user)


@router.post(
    "/auth/register",
    response_model=TokenResponse,
    status_code=201,
    tags=["auth"],
)
def register(
    req: RegisterRequest,
    users: UserRepository = Depends(get_user_repository),
):
    """Self-registration. Always creates a `user` role account."""
    if users.get_user_by_email(req.email):
        raise conflict("User already exists with this email.")

    try:
        user = users.create_user(
            name=req.name,
            email=req.email,
            password_hash=hash_password(req.password),
            role=UserRole.USER,
        )
    except DuplicateEmailError as exc:
        raise conflict("User already exists with this email.") from exc

    logger.info("User registered", extra={"user_id": str(user.id)})
    return _token_response(user)


@router.get("/auth/me", response_model=UserResponse, tags=["auth"])
def me(user: User = Depends(require_user())):
    return _to_user_response(user)


@router.get("/users", response_model=UsersListResponse, tags=["users"])
def list_users(
    _user: User = Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER)),
    users: UserRepository = Depends(get_user_repository),
):
    """Active users, for assignment pickers."""
    return UsersListResponse(
        users=[_to_user_response(u) for u in users.list_users(active_only=True)]
    )


__all__ = ["router"]
