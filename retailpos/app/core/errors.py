"""Error taxonomy shared by services and the HTTP layer.

Services raise these; ``retailpos.app.main`` renders them as
``{"message": ..., "kind": ...}`` with the matching status code.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID


class POSError(Exception):
    status_code = 500
    kind = "Unexpected"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "kind": self.kind}


class Unauthenticated(POSError):
    status_code = 401
    kind = "Unauthenticated"


class Forbidden(POSError):
    status_code = 403
    kind = "Forbidden"


class InvalidInput(POSError):
    status_code = 400
    kind = "InvalidInput"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "field": self.field}


class Conflict(POSError):
    """Uniqueness or referential-integrity violation.

    ``field`` names the duplicated column; ``entity`` names the record kind
    when the conflict is about references rather than a column value.
    """

    status_code = 409
    kind = "Conflict"

    def __init__(
        self, message: str, *, field: str | None = None, entity: str | None = None
    ) -> None:
        super().__init__(message)
        self.field = field
        self.entity = entity

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        if self.entity:
            data["entity"] = self.entity
        return data


class NotFound(POSError):
    status_code = 404
    kind = "NotFound"

    def __init__(self, entity: str, record_id: Any | None = None) -> None:
        message = f"{entity} not found"
        if record_id is not None:
            message = f"{entity} with ID {record_id} not found"
        super().__init__(message)
        self.entity = entity
        self.record_id = record_id

    def to_dict(self) -> dict[str, Any]:
        data = {**super().to_dict(), "entity": self.entity}
        if self.record_id is not None:
            data["id"] = str(self.record_id)
        return data


class InsufficientStock(POSError):
    status_code = 409
    kind = "InsufficientStock"

    def __init__(
        self, product_id: UUID, product_name: str, available: int, requested: int
    ) -> None:
        super().__init__(
            f"Not enough stock for product {product_name}. Available: {available}"
        )
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "product_id": str(self.product_id),
            "available": self.available,
            "requested": self.requested,
        }


class EmptyCart(POSError):
    status_code = 400
    kind = "EmptyCart"

    def __init__(self, message: str = "Cart cannot be empty") -> None:
        super().__init__(message)


class TransientStoreFailure(POSError):
    """The store could not complete the operation; resubmitting is safe."""

    status_code = 503
    kind = "TransientStoreFailure"


class Unexpected(POSError):
    status_code = 500
    kind = "Unexpected"

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)


# ─── Credential verification ─────────────────────────────────────────────────


class CredentialError(Exception):
    """Raised by the token verifier; the access guard maps it to 401."""

    reason = "invalid"


class MalformedCredential(CredentialError):
    reason = "malformed"


class ExpiredCredential(CredentialError):
    reason = "expired"


class InvalidCredential(CredentialError):
    reason = "invalid"
