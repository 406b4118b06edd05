from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class ReportLineOut(BaseModel):
    product_id: UUID
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class ReportSaleOut(BaseModel):
    id: UUID
    sale_date: datetime
    cashier: str
    customer_name: str | None
    customer_is_member: bool | None
    total_amount: Decimal
    discount: Decimal
    final_amount: Decimal
    items: list[ReportLineOut]


class SalesSummaryOut(BaseModel):
    total_sales_count: int
    total_revenue: Decimal
    total_discount_given: Decimal


class SalesReportOut(BaseModel):
    sales: list[ReportSaleOut]
    summary: SalesSummaryOut
