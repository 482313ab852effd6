from __future__ import annotations

from datetime import date
from decimal import Decimal

from pms.domain.models import DashboardStats
from pms.services.pricing import money


class DashboardService:
    def __init__(self, repo, inventory, sales):
        self.repo = repo
        self.inventory = inventory
        self.sales = sales

    def stats(self, today: date | None = None) -> DashboardStats:
        day = today or self.repo.clock().date()
        today_sales = sum((s.total for s in self.sales.sales_on(day)), Decimal(0))
        return DashboardStats(
            total_medicines=len(self.repo.list_medicines()),
            low_stock_items=len(self.inventory.low_stock_medicines()),
            today_sales=money(today_sales),
            # every customer on file counts as active
            active_customers=len(self.repo.list_customers()),
        )
