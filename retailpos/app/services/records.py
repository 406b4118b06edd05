"""Uniqueness and reference checks run before catalog/customer writes."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import InstrumentedAttribute, Session

from retailpos.app.core.errors import Conflict, InvalidInput

logger = logging.getLogger(__name__)


def clean_optional(value: str | None) -> str | None:
    """Collapse blank optional strings to None so they never collide on uniqueness."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def require_name(value: Any, field: str = "name") -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(field, f"{field.capitalize()} is required")
    return value.strip()


def ensure_unique(
    db: Session,
    column: InstrumentedAttribute,
    value: str | None,
    *,
    exclude_id: UUID | None = None,
    case_insensitive: bool = False,
) -> None:
    """Raise ``Conflict`` naming *column* if another row already holds *value*."""
    if value is None:
        return
    model = column.class_
    if case_insensitive:
        query = db.query(model.id).filter(func.lower(column) == value.lower())
    else:
        query = db.query(model.id).filter(column == value)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first() is not None:
        field = column.key
        raise Conflict(f"{field} '{value}' already exists", field=field)


def ensure_unreferenced(
    db: Session,
    fk_column: InstrumentedAttribute,
    record_id: UUID,
    *,
    entity: str,
    message: str,
) -> None:
    """Refuse to delete a record that existing sales still point at."""
    if db.query(fk_column).filter(fk_column == record_id).first() is not None:
        raise Conflict(message, entity=entity)


def flush_or_conflict(db: Session, message: str, **conflict_kwargs: Any) -> None:
    """Flush pending writes; a constraint hit from a concurrent writer becomes ``Conflict``."""
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Constraint violation on flush: %s", exc.orig)
        raise Conflict(message, **conflict_kwargs) from exc
