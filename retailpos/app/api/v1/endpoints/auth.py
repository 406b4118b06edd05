from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from retailpos.app.core.database import get_db
from retailpos.app.core.errors import Unauthenticated
from retailpos.app.core.security import create_access_token
from retailpos.app.services.user_management import authenticate

router = APIRouter()


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1, max_length=128)


class LoginUserOut(BaseModel):
    id: str
    username: str
    role: str


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: LoginUserOut


@router.post("/login", response_model=TokenOut)
def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> dict:
    ip = request.client.host if request.client else "unknown"
    limiter = request.app.state.login_limiter
    limiter.check(ip)

    user = authenticate(
        db, username=payload.username, password=payload.password, ip_address=ip
    )
    db.commit()
    if user is None:
        raise Unauthenticated("Invalid credentials")
    limiter.reset(ip)

    app_settings = request.app.state.settings
    token = create_access_token(
        subject=str(user.id),
        role=user.role,
        expires_delta=timedelta(minutes=app_settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        secret_key=app_settings.SECRET_KEY,
    )
    return {
        "access_token": token,
        "token_type": "bearer",
        "user": {"id": str(user.id), "username": user.username, "role": user.role.value},
    }
