from retailpos.app.models.audit import AuditLog
from retailpos.app.models.customer import Customer, Sale, SaleItem
from retailpos.app.models.inventory import Product
from retailpos.app.models.user import RoleEnum, User

__all__ = [
    "AuditLog",
    "Customer",
    "Product",
    "RoleEnum",
    "Sale",
    "SaleItem",
    "User",
]
