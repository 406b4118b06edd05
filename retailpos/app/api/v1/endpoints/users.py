from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from retailpos.app.api.deps import require_roles
from retailpos.app.core.database import get_db
from retailpos.app.core.security import Claim
from retailpos.app.models.user import RoleEnum, User
from retailpos.app.services.user_management import create_user, get_user, list_users

router = APIRouter()


# ─── Schemas ─────────────────────────────────────────────────────────────────


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    role: RoleEnum
    created_at: datetime | None = None


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=150)
    password: str = Field(..., min_length=1, max_length=128)
    role: RoleEnum


# ─── Endpoints ───────────────────────────────────────────────────────────────


@router.get("/me", response_model=UserOut)
def read_current_user(
    db: Session = Depends(get_db),
    claim: Claim = Depends(require_roles(RoleEnum.ADMIN, RoleEnum.STAFF)),
) -> User:
    return get_user(db, claim.user_id)


@router.get("", response_model=list[UserOut])
def list_all_users(
    db: Session = Depends(get_db),
    _claim: Claim = Depends(require_roles(RoleEnum.ADMIN)),
) -> list[User]:
    """List all accounts. Admin only."""
    return list_users(db)


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_new_user(
    body: UserCreate,
    db: Session = Depends(get_db),
    claim: Claim = Depends(require_roles(RoleEnum.ADMIN)),
) -> User:
    user = create_user(
        db,
        username=body.username,
        password=body.password,
        role=body.role,
        admin_id=claim.user_id,
    )
    db.commit()
    db.refresh(user)
    return user
