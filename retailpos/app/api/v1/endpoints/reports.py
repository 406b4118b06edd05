from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from retailpos.app.api.deps import require_roles
from retailpos.app.core.database import get_db
from retailpos.app.core.security import Claim
from retailpos.app.models.user import RoleEnum
from retailpos.app.schemas.reports import SalesReportOut
from retailpos.app.services.reports import sales_report

router = APIRouter()


@router.get("/sales", response_model=SalesReportOut)
def get_sales_report(
    start_date: date | None = Query(None, description="First day, inclusive"),
    end_date: date | None = Query(None, description="Last day, inclusive"),
    db: Session = Depends(get_db),
    _claim: Claim = Depends(require_roles(RoleEnum.ADMIN)),
) -> dict:
    return sales_report(db, start_date, end_date)
