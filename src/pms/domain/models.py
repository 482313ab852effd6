from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


PAYMENT_METHODS = ("cash", "card", "insurance")
WALK_IN_CUSTOMER = "Walk-in Customer"


@dataclass(frozen=True)
class Medicine:
    id: int
    name: str
    category: str
    manufacturer: str
    batch_number: str
    expiry_date: str
    purchase_price: Decimal
    selling_price: Decimal
    created_at: datetime
    quantity: int = 0
    minimum_stock: int = 10
    generic_name: Optional[str] = None
    supplier_id: Optional[int] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class Customer:
    id: int
    name: str
    phone: str
    created_at: datetime
    email: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[str] = None


@dataclass(frozen=True)
class Supplier:
    id: int
    name: str
    phone: str
    created_at: datetime
    email: Optional[str] = None
    address: Optional[str] = None
    contact_person: Optional[str] = None


@dataclass(frozen=True)
class Sale:
    id: int
    customer_name: str
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    payment_method: str
    created_at: datetime
    customer_id: Optional[int] = None


@dataclass(frozen=True)
class SaleItem:
    id: int
    sale_id: int
    medicine_id: int
    medicine_name: str
    quantity: int
    price: Decimal
    total: Decimal


@dataclass(frozen=True)
class SaleWithItems:
    id: int
    customer_name: str
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    payment_method: str
    created_at: datetime
    customer_id: Optional[int] = None
    items: list[SaleItem] = field(default_factory=list)

    @classmethod
    def compose(cls, sale: Sale, items: list[SaleItem]) -> "SaleWithItems":
        return cls(
            id=sale.id,
            customer_name=sale.customer_name,
            subtotal=sale.subtotal,
            tax=sale.tax,
            total=sale.total,
            payment_method=sale.payment_method,
            created_at=sale.created_at,
            customer_id=sale.customer_id,
            items=list(items),
        )


@dataclass(frozen=True)
class DashboardStats:
    total_medicines: int
    low_stock_items: int
    today_sales: Decimal
    active_customers: int


@dataclass(frozen=True)
class CategorySummary:
    category: str
    count: int
    value: Decimal


@dataclass(frozen=True)
class ReportSummary:
    total_revenue: Decimal
    sales_count: int
    average_order_value: Decimal
    monthly_revenue: Decimal
    inventory_value: Decimal
    low_stock_count: int
    out_of_stock_count: int
    top_categories: list[CategorySummary]
