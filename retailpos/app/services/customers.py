"""Customer records: CRUD with independent email/phone uniqueness."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from retailpos.app.core.errors import InvalidInput, NotFound
from retailpos.app.models.customer import Customer, Sale
from retailpos.app.services.audit import log_action
from retailpos.app.services.records import (
    clean_optional,
    ensure_unique,
    ensure_unreferenced,
    flush_or_conflict,
    require_name,
)

_UPDATABLE_FIELDS = ("name", "email", "phone", "is_member")


def _snapshot(customer: Customer) -> dict[str, Any]:
    return {
        "name": customer.name,
        "email": customer.email,
        "phone": customer.phone,
        "is_member": customer.is_member,
    }


def list_customers(db: Session, q: str | None = None) -> list[Customer]:
    query = db.query(Customer)
    if q:
        like = f"%{q}%"
        query = query.filter(
            Customer.name.ilike(like)
            | Customer.email.ilike(like)
            | Customer.phone.ilike(like)
        )
    return query.order_by(Customer.name).all()


def get_customer(db: Session, customer_id: UUID) -> Customer:
    customer = db.get(Customer, customer_id)
    if customer is None:
        raise NotFound("Customer", customer_id)
    return customer


def create_customer(
    db: Session,
    *,
    name: Any,
    email: str | None = None,
    phone: str | None = None,
    is_member: bool = False,
    user_id: UUID | None = None,
) -> Customer:
    customer = Customer(
        name=require_name(name),
        email=clean_optional(email),
        phone=clean_optional(phone),
        is_member=bool(is_member),
    )
    ensure_unique(db, Customer.email, customer.email)
    ensure_unique(db, Customer.phone, customer.phone)

    db.add(customer)
    flush_or_conflict(db, "Email or phone number already exists")

    log_action(
        db,
        user_id=user_id,
        action="CUSTOMER_CREATED",
        resource_type="customers",
        resource_id=str(customer.id),
        changes=_snapshot(customer),
    )
    return customer


def update_customer(
    db: Session,
    customer_id: UUID,
    changes: dict[str, Any],
    *,
    user_id: UUID | None = None,
) -> Customer:
    customer = get_customer(db, customer_id)

    values: dict[str, Any] = {}
    for field, value in changes.items():
        if field not in _UPDATABLE_FIELDS:
            continue
        if field == "name":
            values[field] = require_name(value)
        elif field == "is_member":
            if value is None:
                raise InvalidInput(field, "is_member must be true or false")
            values[field] = bool(value)
        else:
            values[field] = clean_optional(value)

    if "email" in values:
        ensure_unique(db, Customer.email, values["email"], exclude_id=customer.id)
    if "phone" in values:
        ensure_unique(db, Customer.phone, values["phone"], exclude_id=customer.id)

    for field, value in values.items():
        setattr(customer, field, value)
    flush_or_conflict(db, "Email or phone number already exists for another customer")

    if values:
        log_action(
            db,
            user_id=user_id,
            action="CUSTOMER_UPDATED",
            resource_type="customers",
            resource_id=str(customer.id),
            changes=_snapshot(customer),
        )
    return customer


def delete_customer(db: Session, customer_id: UUID, *, user_id: UUID | None = None) -> None:
    customer = get_customer(db, customer_id)
    ensure_unreferenced(
        db,
        Sale.customer_id,
        customer.id,
        entity="Customer",
        message="Cannot delete customer that is linked to existing sales.",
    )
    db.delete(customer)
    flush_or_conflict(
        db, "Cannot delete customer that is linked to existing sales.", entity="Customer"
    )
    log_action(
        db,
        user_id=user_id,
        action="CUSTOMER_DELETED",
        resource_type="customers",
        resource_id=str(customer_id),
        changes={"name": customer.name},
    )
