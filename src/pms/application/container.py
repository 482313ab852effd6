from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from pms.config import Settings
from pms.repositories.memory_repo import MemoryRepository
from pms.services.customer_service import CustomerService
from pms.services.dashboard_service import DashboardService
from pms.services.inventory_service import InventoryService
from pms.services.reporting_service import ReportingService
from pms.services.sales_service import SalesService
from pms.services.supplier_service import SupplierService


@dataclass(frozen=True)
class AppContainer:
    repo: MemoryRepository
    inventory: InventoryService
    customers: CustomerService
    suppliers: SupplierService
    sales: SalesService
    dashboard: DashboardService
    reporting: ReportingService


def build_container(settings: Settings | None = None, clock: Callable[[], datetime] | None = None) -> AppContainer:
    settings = settings or Settings()

    repo = MemoryRepository(clock=clock)
    if settings.seed_sample_data:
        repo.seed_sample_data()

    inventory = InventoryService(repo)
    customers = CustomerService(repo)
    suppliers = SupplierService(repo)
    sales = SalesService(repo, tax_rate=settings.tax_rate)
    dashboard = DashboardService(repo, inventory, sales)
    reporting = ReportingService(repo, inventory, sales)

    return AppContainer(
        repo=repo,
        inventory=inventory,
        customers=customers,
        suppliers=suppliers,
        sales=sales,
        dashboard=dashboard,
        reporting=reporting,
    )
