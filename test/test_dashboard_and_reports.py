from datetime import datetime
from decimal import Decimal
from io import BytesIO

from openpyxl import load_workbook

from conftest import FixedClock, medicine_fields

from pms.repositories.memory_repo import MemoryRepository
from pms.services.customer_service import CustomerService
from pms.services.dashboard_service import DashboardService
from pms.services.inventory_service import InventoryService
from pms.services.reporting_service import ReportingService
from pms.services.sales_service import SalesService


def _setup():
    repo = MemoryRepository(clock=FixedClock(datetime(2026, 10, 18, 9, 30)))
    inventory = InventoryService(repo)
    sales = SalesService(repo)
    low = inventory.add_medicine(medicine_fields())
    healthy = inventory.add_medicine(medicine_fields(
        name="Vitamin C 1000mg", category="Supplements", manufacturer="NutriLabs",
        selling_price="12.00", quantity=100, minimum_stock=10,
    ))
    CustomerService(repo).add_customer({"name": "Sarah Johnson", "phone": "+1-555-0201"})
    return repo, inventory, sales, low, healthy


def test_dashboard_stats_counts_and_same_day_revenue():
    repo, inventory, sales, _, healthy = _setup()
    dashboard = DashboardService(repo, inventory, sales)

    sale = sales.create_sale(
        items=[{"medicine_id": healthy.id, "quantity": 1}],
        discount_type="fixed",
        discount_value="0.10",
    )
    assert sale.total == Decimal("12.50")

    stats = dashboard.stats()

    assert stats.total_medicines == 2
    assert stats.low_stock_items == 1
    assert stats.today_sales == Decimal("12.50")
    assert stats.active_customers == 1


def test_dashboard_only_counts_sales_from_the_current_day():
    repo, inventory, sales, _, healthy = _setup()
    dashboard = DashboardService(repo, inventory, sales)

    repo.clock.now = datetime(2026, 10, 17, 23, 59, 59)
    sales.create_sale(items=[{"medicine_id": healthy.id, "quantity": 1}])
    repo.clock.now = datetime(2026, 10, 18, 0, 0, 0)
    sales.create_sale(items=[{"medicine_id": healthy.id, "quantity": 2}])

    assert dashboard.stats().today_sales == Decimal("25.20")
    assert dashboard.stats(today=datetime(2026, 10, 17).date()).today_sales == Decimal("12.60")


def test_report_summary_aggregates_revenue_and_inventory():
    repo, inventory, sales, low, healthy = _setup()
    reporting = ReportingService(repo, inventory, sales)

    repo.clock.now = datetime(2026, 9, 30, 18, 0)
    sales.create_sale(items=[{"medicine_id": healthy.id, "quantity": 1}])
    repo.clock.now = datetime(2026, 10, 18, 9, 30)
    sales.create_sale(items=[{"medicine_id": low.id, "quantity": 2}])
    inventory.add_medicine(medicine_fields(name="Empty", category="Supplements", quantity=0, minimum_stock=5))

    report = reporting.summary()

    assert report.sales_count == 2
    assert report.total_revenue == Decimal("17.85")
    assert report.average_order_value == Decimal("8.93")
    assert report.monthly_revenue == Decimal("5.25")
    # 6 x 2.50 + 99 x 12.00
    assert report.inventory_value == Decimal("1203.00")
    assert report.low_stock_count == 2
    assert report.out_of_stock_count == 1
    assert [(c.category, c.count, c.value) for c in report.top_categories] == [
        ("Supplements", 2, Decimal("1188.00")),
        ("Pain Relief", 1, Decimal("15.00")),
    ]


def test_report_summary_with_no_sales_has_zero_average():
    repo, inventory, sales, _, _ = _setup()
    report = ReportingService(repo, inventory, sales).summary()

    assert report.sales_count == 0
    assert report.average_order_value == Decimal("0.00")


def test_export_report_excel_writes_all_sheets():
    repo, inventory, sales, low, healthy = _setup()
    sales.create_sale(items=[
        {"medicine_id": healthy.id, "quantity": 1},
        {"medicine_id": low.id, "quantity": 1},
    ])
    reporting = ReportingService(repo, inventory, sales)

    buf = BytesIO()
    reporting.export_report_excel(buf)
    buf.seek(0)
    wb = load_workbook(buf)

    assert wb.sheetnames == ["Summary", "Sales Detail", "Inventory", "Low Stock"]
    assert wb["Summary"]["B5"].value == 1

    detail = list(wb["Sales Detail"].iter_rows(min_row=2, values_only=True))
    assert [(row[4], row[6]) for row in detail] == [(healthy.id, 1), (low.id, 1)]

    inventory_rows = list(wb["Inventory"].iter_rows(min_row=2, values_only=True))
    assert [row[-1] for row in inventory_rows] == ["low_stock", "in_stock"]

    low_rows = list(wb["Low Stock"].iter_rows(min_row=2, values_only=True))
    assert low_rows == [(low.id, "Paracetamol 500mg", "Pain Relief", 7, 50, 43)]


def test_export_strips_control_characters_from_text_cells():
    repo, inventory, sales, low, healthy = _setup()
    inventory.update_medicine(low.id, {"name": "Para\x01cetamol", "category": "Pain\x1fRelief"})
    sales.create_sale(
        items=[{"medicine_id": healthy.id, "quantity": 1, "medicine_name": "Vitamin\x0b C"}],
        customer_name="Walk\x07-in",
    )
    reporting = ReportingService(repo, inventory, sales)

    buf = BytesIO()
    reporting.export_report_excel(buf)
    buf.seek(0)
    wb = load_workbook(buf)

    detail = next(wb["Sales Detail"].iter_rows(min_row=2, values_only=True))
    assert (detail[2], detail[5]) == ("Walk-in", "Vitamin C")
    assert wb["Inventory"]["B2"].value == "Paracetamol"
    assert wb["Low Stock"]["C2"].value == "PainRelief"
    assert repo.get_medicine(low.id).name == "Para\x01cetamol"
