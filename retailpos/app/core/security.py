from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from retailpos.app.core.config import settings
from retailpos.app.core.errors import (
    ExpiredCredential,
    InvalidCredential,
    MalformedCredential,
)
from retailpos.app.models.user import RoleEnum

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Claim:
    """Identity and role carried by a verified access token."""

    user_id: UUID
    role: RoleEnum
    expires_at: datetime


def create_access_token(
    subject: str,
    role: RoleEnum,
    expires_delta: timedelta | None = None,
    *,
    secret_key: str | None = None,
    now: datetime | None = None,
) -> str:
    issued = now or datetime.now(timezone.utc)
    expire = issued + (
        expires_delta
        if expires_delta is not None
        else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {
        "sub": subject,
        "role": role.value,
        "iat": int(issued.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(to_encode, secret_key or settings.SECRET_KEY, algorithm=ALGORITHM)


def verify_access_token(
    token: str,
    *,
    secret_key: str | None = None,
    now: datetime | None = None,
) -> Claim:
    """Check signature and expiry of *token* and return its claim.

    Raises ``MalformedCredential`` when the token cannot be decoded or its
    payload is missing ``sub``/``role``/``exp``, ``InvalidCredential`` when the
    signature does not match, and ``ExpiredCredential`` once ``now >= exp``.
    """
    try:
        unverified = jwt.get_unverified_claims(token)
    except JWTError as exc:
        raise MalformedCredential(str(exc)) from exc

    try:
        user_id = UUID(str(unverified["sub"]))
        role = RoleEnum(unverified["role"])
        exp = int(unverified["exp"])
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedCredential("Token payload is incomplete") from exc

    try:
        jwt.decode(
            token,
            secret_key or settings.SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"verify_exp": False},
        )
    except JWTError as exc:
        raise InvalidCredential(str(exc)) from exc

    expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
    current = now or datetime.now(timezone.utc)
    if current >= expires_at:
        raise ExpiredCredential("Token expired")

    return Claim(user_id=user_id, role=role, expires_at=expires_at)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def validate_password_strength(password: str) -> str | None:
    """Return an error message if *password* is too weak, else None."""
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        return f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
    if not re.search(r"[A-Za-z]", password):
        return "Password must contain at least one letter"
    if not re.search(r"\d", password):
        return "Password must contain at least one digit"
    return None
