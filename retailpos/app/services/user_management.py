"""User management service: account creation, listing and login checks.

All mutations are audit-logged. This module does NOT call db.commit();
the caller (endpoint) is responsible for committing.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from retailpos.app.core.errors import InvalidInput, NotFound
from retailpos.app.core.security import (
    get_password_hash,
    validate_password_strength,
    verify_password,
)
from retailpos.app.models.user import RoleEnum, User
from retailpos.app.services.audit import log_action
from retailpos.app.services.records import ensure_unique, flush_or_conflict, require_name

logger = logging.getLogger(__name__)


def list_users(db: Session) -> list[User]:
    """Return all users ordered by creation date descending."""
    return db.query(User).order_by(User.created_at.desc()).all()


def get_user(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User", user_id)
    return user


def create_user(
    db: Session,
    *,
    username: str,
    password: str,
    role: RoleEnum,
    admin_id: UUID | None,
) -> User:
    """Create a new account. Usernames are unique regardless of case."""
    username = require_name(username, field="username")
    pw_error = validate_password_strength(password)
    if pw_error:
        raise InvalidInput("password", pw_error)

    ensure_unique(db, User.username, username, case_insensitive=True)

    user = User(
        username=username,
        hashed_password=get_password_hash(password),
        role=role,
    )
    db.add(user)
    flush_or_conflict(db, "Username already exists", field="username")

    log_action(
        db,
        user_id=admin_id,
        action="USER_CREATED",
        resource_type="users",
        resource_id=str(user.id),
        changes={"username": username, "role": role.value},
    )
    return user


def authenticate(
    db: Session,
    *,
    username: str,
    password: str,
    ip_address: str | None = None,
) -> User | None:
    """Return the user when *password* matches, else None. Both outcomes are audited."""
    user = db.query(User).filter(User.username == username).first()
    if user is None or not verify_password(password, user.hashed_password):
        logger.info("Rejected login for %r from %s", username, ip_address)
        log_action(
            db,
            user_id=user.id if user else None,
            action="LOGIN_FAILED",
            resource_type="auth",
            resource_id=username,
            ip_address=ip_address,
            changes={"reason": "invalid_credentials"},
        )
        return None

    log_action(
        db,
        user_id=user.id,
        action="LOGIN_SUCCESS",
        resource_type="auth",
        resource_id=str(user.id),
        ip_address=ip_address,
        changes={"username": user.username, "role": user.role.value},
    )
    return user
