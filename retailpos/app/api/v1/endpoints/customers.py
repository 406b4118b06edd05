from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from retailpos.app.api.deps import require_roles
from retailpos.app.core.database import get_db
from retailpos.app.core.security import Claim
from retailpos.app.models.customer import Customer
from retailpos.app.models.user import RoleEnum
from retailpos.app.schemas.customer import CustomerCreate, CustomerOut, CustomerUpdate
from retailpos.app.services.customers import (
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    update_customer,
)

router = APIRouter()


@router.get("", response_model=list[CustomerOut])
def get_customers(
    q: str | None = Query(None, description="Search by name, email, or phone"),
    db: Session = Depends(get_db),
    _claim: Claim = Depends(require_roles(RoleEnum.ADMIN, RoleEnum.STAFF)),
) -> list[Customer]:
    return list_customers(db, q)


@router.post("", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
def create_new_customer(
    payload: CustomerCreate,
    db: Session = Depends(get_db),
    claim: Claim = Depends(require_roles(RoleEnum.ADMIN, RoleEnum.STAFF)),
) -> Customer:
    customer = create_customer(db, **payload.model_dump(), user_id=claim.user_id)
    db.commit()
    db.refresh(customer)
    return customer


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer_by_id(
    customer_id: UUID,
    db: Session = Depends(get_db),
    _claim: Claim = Depends(require_roles(RoleEnum.ADMIN, RoleEnum.STAFF)),
) -> Customer:
    return get_customer(db, customer_id)


@router.put("/{customer_id}", response_model=CustomerOut)
def update_existing_customer(
    customer_id: UUID,
    payload: CustomerUpdate,
    db: Session = Depends(get_db),
    claim: Claim = Depends(require_roles(RoleEnum.ADMIN, RoleEnum.STAFF)),
) -> Customer:
    customer = update_customer(
        db, customer_id, payload.model_dump(exclude_unset=True), user_id=claim.user_id
    )
    db.commit()
    db.refresh(customer)
    return customer


@router.delete("/{customer_id}")
def delete_existing_customer(
    customer_id: UUID,
    db: Session = Depends(get_db),
    claim: Claim = Depends(require_roles(RoleEnum.ADMIN)),
) -> dict[str, str]:
    delete_customer(db, customer_id, user_id=claim.user_id)
    db.commit()
    return {"message": "Customer deleted successfully"}
