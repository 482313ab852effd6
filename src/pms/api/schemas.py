"""
Request and response bodies for the HTTP API.

JSON keys are camelCase (``genericName``, ``minimumStock``); Python attributes stay
snake_case so the models map one-to-one onto the domain dataclasses.
"""
from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pms.services.pricing import MAX_PRICE, PRICE_DIGITS
from pms.services.record_rules import MEDICINE_RULES

# Shape checks for HTTP bodies. Defaults and the price cap come from the services,
# which re-validate every call.
PRICE = {"ge": 0, "le": MAX_PRICE, "max_digits": PRICE_DIGITS, "decimal_places": 2}
AMOUNT = {"max_digits": PRICE_DIGITS + 4, "decimal_places": 2}


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_record(cls, record):
        return cls.model_validate(asdict(record))


# ---------- Medicines ----------
class MedicineCreate(ApiModel):
    name: str = Field(min_length=1)
    generic_name: Optional[str] = None
    category: str = Field(min_length=1)
    manufacturer: str = Field(min_length=1)
    batch_number: str = Field(min_length=1)
    expiry_date: date
    quantity: int = Field(MEDICINE_RULES.defaults["quantity"], ge=0)
    purchase_price: Decimal = Field(**PRICE)
    selling_price: Decimal = Field(**PRICE)
    minimum_stock: int = Field(MEDICINE_RULES.defaults["minimum_stock"], ge=0)
    supplier_id: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None


class MedicineUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    generic_name: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    manufacturer: Optional[str] = Field(None, min_length=1)
    batch_number: Optional[str] = Field(None, min_length=1)
    expiry_date: Optional[date] = None
    quantity: Optional[int] = Field(None, ge=0)
    purchase_price: Optional[Decimal] = Field(None, **PRICE)
    selling_price: Optional[Decimal] = Field(None, **PRICE)
    minimum_stock: Optional[int] = Field(None, ge=0)
    supplier_id: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None


class MedicineOut(ApiModel):
    id: int
    name: str
    generic_name: Optional[str] = None
    category: str
    manufacturer: str
    batch_number: str
    expiry_date: str
    quantity: int
    purchase_price: Decimal
    selling_price: Decimal
    minimum_stock: int
    supplier_id: Optional[int] = None
    description: Optional[str] = None
    created_at: datetime


# ---------- Customers ----------
class CustomerCreate(ApiModel):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: str = Field(min_length=1)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None


class CustomerUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None


class CustomerOut(ApiModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: str
    address: Optional[str] = None
    date_of_birth: Optional[str] = None
    created_at: datetime


# ---------- Suppliers ----------
class SupplierCreate(ApiModel):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: str = Field(min_length=1)
    address: Optional[str] = None
    contact_person: Optional[str] = None


class SupplierUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
    contact_person: Optional[str] = None


class SupplierOut(ApiModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: str
    address: Optional[str] = None
    contact_person: Optional[str] = None
    created_at: datetime


# ---------- Sales ----------
class SaleItemCreate(ApiModel):
    medicine_id: int = Field(ge=1)
    medicine_name: Optional[str] = None
    quantity: int = Field(gt=0)
    price: Optional[Decimal] = Field(None, **PRICE)
    total: Optional[Decimal] = Field(None, **AMOUNT)


class SaleCreate(ApiModel):
    customer_id: Optional[int] = Field(None, ge=1)
    customer_name: Optional[str] = None
    payment_method: Literal["cash", "card", "insurance"] = "cash"
    discount_type: Literal["fixed", "percentage"] = "fixed"
    discount_value: Decimal = Field(Decimal(0), **PRICE)
    subtotal: Optional[Decimal] = Field(None, **AMOUNT)
    tax: Optional[Decimal] = Field(None, **AMOUNT)
    total: Optional[Decimal] = Field(None, **AMOUNT)
    items: list[SaleItemCreate] = Field(min_length=1)

    def submitted_totals(self) -> dict:
        return {"subtotal": self.subtotal, "tax": self.tax, "total": self.total}


class SaleOut(ApiModel):
    id: int
    customer_id: Optional[int] = None
    customer_name: str
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    payment_method: str
    created_at: datetime


class SaleItemOut(ApiModel):
    id: int
    sale_id: int
    medicine_id: int
    medicine_name: str
    quantity: int
    price: Decimal
    total: Decimal


class SaleWithItemsOut(SaleOut):
    items: list[SaleItemOut]


# ---------- Dashboard / reports ----------
class DashboardStatsOut(ApiModel):
    total_medicines: int
    low_stock_items: int
    today_sales: float
    active_customers: int


class CategorySummaryOut(ApiModel):
    category: str
    count: int
    value: Decimal


class ReportSummaryOut(ApiModel):
    total_revenue: Decimal
    sales_count: int
    average_order_value: Decimal
    monthly_revenue: Decimal
    inventory_value: Decimal
    low_stock_count: int
    out_of_stock_count: int
    top_categories: list[CategorySummaryOut]
