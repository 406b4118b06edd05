from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from retailpos.app.api.deps import require_roles
from retailpos.app.core.database import get_db
from retailpos.app.core.security import Claim
from retailpos.app.models.customer import Sale
from retailpos.app.models.user import RoleEnum
from retailpos.app.schemas.pos import SaleCreatedOut, SaleOut, SaleRequest
from retailpos.app.services.pos import commit_sale, get_sale

router = APIRouter()


@router.post("", response_model=SaleCreatedOut, status_code=status.HTTP_201_CREATED)
def create_sale(
    payload: SaleRequest,
    request: Request,
    db: Session = Depends(get_db),
    claim: Claim = Depends(require_roles(RoleEnum.ADMIN, RoleEnum.STAFF)),
) -> dict:
    app_settings = request.app.state.settings
    sale = commit_sale(
        db,
        cashier_id=claim.user_id,
        items=payload.items,
        customer_id=payload.customer_id,
        reject_unknown_customer=app_settings.REJECT_UNKNOWN_CUSTOMER,
        max_attempts=app_settings.SALE_COMMIT_MAX_ATTEMPTS,
        backoff_base=app_settings.SALE_COMMIT_RETRY_BACKOFF_SECONDS,
        ip_address=request.client.host if request.client else None,
    )
    return {
        "sale_id": sale.id,
        "total_amount": sale.total_amount,
        "discount": sale.discount,
        "final_amount": sale.final_amount,
    }


@router.get("/{sale_id}", response_model=SaleOut)
def read_sale(
    sale_id: UUID,
    db: Session = Depends(get_db),
    _claim: Claim = Depends(require_roles(RoleEnum.ADMIN, RoleEnum.STAFF)),
) -> Sale:
    return get_sale(db, sale_id)
