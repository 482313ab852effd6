from .inventory_service import InventoryService
from .customer_service import CustomerService
from .supplier_service import SupplierService
from .sales_service import SalesService
from .dashboard_service import DashboardService
from .reporting_service import ReportingService

__all__ = [
    "InventoryService",
    "CustomerService",
    "SupplierService",
    "SalesService",
    "DashboardService",
    "ReportingService",
]
