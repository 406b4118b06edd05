from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from retailpos.app.api.deps import require_roles
from retailpos.app.core.database import get_db
from retailpos.app.core.security import Claim
from retailpos.app.models.inventory import Product
from retailpos.app.models.user import RoleEnum
from retailpos.app.schemas.inventory import ProductCreate, ProductOut, ProductUpdate
from retailpos.app.services.inventory import (
    create_product,
    delete_product,
    get_product,
    list_products,
    update_product,
)

router = APIRouter()


@router.get("", response_model=list[ProductOut])
def get_products(
    db: Session = Depends(get_db),
    _claim: Claim = Depends(require_roles(RoleEnum.ADMIN, RoleEnum.STAFF)),
) -> list[Product]:
    return list_products(db)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_new_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    claim: Claim = Depends(require_roles(RoleEnum.ADMIN)),
) -> Product:
    product = create_product(db, **payload.model_dump(), admin_id=claim.user_id)
    db.commit()
    db.refresh(product)
    return product


@router.get("/{product_id}", response_model=ProductOut)
def get_product_by_id(
    product_id: UUID,
    db: Session = Depends(get_db),
    _claim: Claim = Depends(require_roles(RoleEnum.ADMIN, RoleEnum.STAFF)),
) -> Product:
    return get_product(db, product_id)


@router.put("/{product_id}", response_model=ProductOut)
def update_existing_product(
    product_id: UUID,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    claim: Claim = Depends(require_roles(RoleEnum.ADMIN)),
) -> Product:
    product = update_product(
        db, product_id, payload.model_dump(exclude_unset=True), admin_id=claim.user_id
    )
    db.commit()
    db.refresh(product)
    return product


@router.delete("/{product_id}")
def delete_existing_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    claim: Claim = Depends(require_roles(RoleEnum.ADMIN)),
) -> dict[str, str]:
    delete_product(db, product_id, admin_id=claim.user_id)
    db.commit()
    return {"message": "Product deleted successfully"}
