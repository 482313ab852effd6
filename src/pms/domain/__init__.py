from .models import Medicine, Customer, Supplier, Sale, SaleItem, SaleWithItems, DashboardStats, ReportSummary
from .errors import (
    ValidationError,
    NotFoundError,
    InsufficientStockError,
    UnknownReferenceError,
    TotalsMismatchError,
)

__all__ = [
    "Medicine",
    "Customer",
    "Supplier",
    "Sale",
    "SaleItem",
    "SaleWithItems",
    "DashboardStats",
    "ReportSummary",
    "ValidationError",
    "NotFoundError",
    "InsufficientStockError",
    "UnknownReferenceError",
    "TotalsMismatchError",
]
