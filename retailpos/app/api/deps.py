"""Role gate for endpoints.

Usage in endpoints::

    @router.post("")
    def create_product(
        payload: ProductCreate,
        db: Session = Depends(get_db),
        claim: Claim = Depends(require_roles(RoleEnum.ADMIN)),
    ):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from fastapi import Request
from fastapi.security.utils import get_authorization_scheme_param

from retailpos.app.core.errors import (
    CredentialError,
    ExpiredCredential,
    Forbidden,
    Unauthenticated,
)
from retailpos.app.core.security import Claim, verify_access_token
from retailpos.app.models.user import RoleEnum

logger = logging.getLogger(__name__)

ANY_ROLE: frozenset[RoleEnum] = frozenset(RoleEnum)
ADMIN_ONLY: frozenset[RoleEnum] = frozenset({RoleEnum.ADMIN})


def authorize(
    authorization: str | None,
    required_roles: Iterable[RoleEnum],
    *,
    secret_key: str | None = None,
) -> Claim:
    """Verify the bearer token in *authorization* and check its role.

    No store access and no side effects: the claim comes from the token alone.
    """
    scheme, token = get_authorization_scheme_param(authorization)
    if not authorization or scheme.lower() != "bearer" or not token:
        raise Unauthenticated("Authorization token missing or malformed")

    try:
        claim = verify_access_token(token, secret_key=secret_key)
    except ExpiredCredential as exc:
        raise Unauthenticated("Unauthorized: Token expired") from exc
    except CredentialError as exc:
        logger.info("Rejected %s token: %s", exc.reason, exc)
        raise Unauthenticated("Unauthorized: Invalid token") from exc

    if claim.role not in frozenset(required_roles):
        raise Forbidden("Forbidden: Insufficient permissions")
    return claim


def require_roles(*roles: RoleEnum) -> Callable[[Request], Claim]:
    """FastAPI dependency factory; returns the verified ``Claim``.

        claim = Depends(require_roles(RoleEnum.ADMIN, RoleEnum.STAFF))
    """
    required = frozenset(roles)

    def _checker(request: Request) -> Claim:
        return authorize(
            request.headers.get("Authorization"),
            required,
            secret_key=request.app.state.settings.SECRET_KEY,
        )

    return _checker
