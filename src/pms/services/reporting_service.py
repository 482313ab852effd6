from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, time
from decimal import Decimal
from typing import BinaryIO

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from pms.domain.models import CategorySummary, ReportSummary
from pms.services.inventory_service import OUT_OF_STOCK, stock_status
from pms.services.pricing import money


def _cell_text(value):
    """Control characters are legal in stored names but not in xlsx cells."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def _append(ws, values) -> None:
    ws.append([_cell_text(v) for v in values])


class ReportingService:
    def __init__(self, repo, inventory, sales):
        self.repo = repo
        self.inventory = inventory
        self.sales = sales

    def top_categories(self, limit: int = 5) -> list[CategorySummary]:
        counts: dict[str, int] = defaultdict(int)
        values: dict[str, Decimal] = defaultdict(Decimal)
        for m in self.repo.list_medicines():
            counts[m.category] += 1
            values[m.category] += m.selling_price * m.quantity
        ranked = sorted(counts, key=lambda c: (-values[c], c))
        return [CategorySummary(category=c, count=counts[c], value=money(values[c])) for c in ranked[:limit]]

    def summary(self, today: date | None = None) -> ReportSummary:
        day = today or self.repo.clock().date()
        sales = self.sales.list_sales()
        medicines = self.repo.list_medicines()

        total_revenue = money(sum((s.total for s in sales), Decimal(0)))
        average = money(total_revenue / len(sales)) if sales else Decimal("0.00")

        month_start = datetime.combine(day.replace(day=1), time.min)
        if day.month == 12:
            next_month = day.replace(year=day.year + 1, month=1, day=1)
        else:
            next_month = day.replace(month=day.month + 1, day=1)
        month_sales = self.sales.sales_between(month_start, datetime.combine(next_month, time.min))

        return ReportSummary(
            total_revenue=total_revenue,
            sales_count=len(sales),
            average_order_value=average,
            monthly_revenue=money(sum((s.total for s in month_sales), Decimal(0))),
            inventory_value=money(sum((m.selling_price * m.quantity for m in medicines), Decimal(0))),
            low_stock_count=len(self.inventory.low_stock_medicines()),
            out_of_stock_count=sum(1 for m in medicines if stock_status(m) == OUT_OF_STOCK),
            top_categories=self.top_categories(),
        )

    def export_report_excel(self, target: str | BinaryIO, today: date | None = None) -> None:
        wb = Workbook()

        def money_fmt(cell):
            cell.number_format = "#,##0.00"

        def bold_row(ws, r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(ws, widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(ws, name: str, start_row: int, start_col: int, end_row: int, end_col: int):
            ref = f"{get_column_letter(start_col)}{start_row}:{get_column_letter(end_col)}{end_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium9",
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(tab)

        report = self.summary(today)

        # -------- 1) Summary --------
        ws = wb.active
        ws.title = "Summary"
        ws["A1"] = "Pharmacy Report"
        ws["A1"].font = Font(bold=True, size=14)

        ws["A3"] = "Generated"
        ws["B3"] = self.repo.clock().replace(microsecond=0).isoformat(sep=" ")

        rows = [
            ("Sales count", report.sales_count, "int"),
            ("Total revenue", report.total_revenue, "money"),
            ("Average order value", report.average_order_value, "money"),
            ("Revenue this month", report.monthly_revenue, "money"),
            ("Inventory value", report.inventory_value, "money"),
            ("Low stock items", report.low_stock_count, "int"),
            ("Out of stock items", report.out_of_stock_count, "int"),
        ]

        start_row = 5
        for i, (label, val, kind) in enumerate(rows):
            r = start_row + i
            ws[f"A{r}"] = label
            if kind == "money":
                ws[f"B{r}"] = float(val)
                money_fmt(ws[f"B{r}"])
            else:
                ws[f"B{r}"] = int(val)

        r = start_row + len(rows) + 1
        ws[f"A{r}"] = "Top categories"
        ws[f"A{r}"].font = Font(bold=True)
        for cat in report.top_categories:
            r += 1
            ws[f"A{r}"] = _cell_text(f"{cat.category} ({cat.count} items)")
            ws[f"B{r}"] = float(cat.value)
            money_fmt(ws[f"B{r}"])

        set_widths(ws, {"A": 32, "B": 24})

        # -------- 2) Sales Detail --------
        ws2 = wb.create_sheet("Sales Detail")
        ws2.append([
            "Sale ID", "Datetime", "Customer", "Payment",
            "Medicine ID", "Medicine Name",
            "Qty", "Unit Price", "Line Total", "Sale Total",
        ])
        bold_row(ws2, 1)

        out_row = 2
        for s in self.sales.list_sales():
            for it in self.repo.sale_items_for_sale(s.id):
                _append(ws2, [
                    int(s.id), s.created_at.replace(microsecond=0).isoformat(sep=" "), s.customer_name, s.payment_method,
                    int(it.medicine_id), it.medicine_name,
                    int(it.quantity), float(it.price), float(it.total), float(s.total),
                ])
                for col in ("H", "I", "J"):
                    money_fmt(ws2[f"{col}{out_row}"])
                out_row += 1

        ws2.freeze_panes = "A2"
        set_widths(ws2, {
            "A": 10, "B": 22, "C": 28, "D": 12,
            "E": 12, "F": 34,
            "G": 6, "H": 14, "I": 14, "J": 14,
        })
        if ws2.max_row >= 2:
            add_table(ws2, "SalesDetail", 1, 1, ws2.max_row, 10)

        # -------- 3) Inventory --------
        ws3 = wb.create_sheet("Inventory")
        ws3.append([
            "ID", "Name", "Generic Name", "Category", "Manufacturer", "Batch",
            "Expiry", "Qty", "Min Stock", "Selling Price", "Stock Value", "Status",
        ])
        bold_row(ws3, 1)

        out_row = 2
        for m in self.repo.list_medicines():
            _append(ws3, [
                int(m.id), m.name, m.generic_name or "", m.category, m.manufacturer, m.batch_number,
                m.expiry_date, int(m.quantity), int(m.minimum_stock),
                float(m.selling_price), float(m.selling_price * m.quantity), stock_status(m),
            ])
            money_fmt(ws3[f"J{out_row}"])
            money_fmt(ws3[f"K{out_row}"])
            out_row += 1

        ws3.freeze_panes = "A2"
        set_widths(ws3, {
            "A": 6, "B": 28, "C": 22, "D": 18, "E": 22, "F": 14,
            "G": 12, "H": 8, "I": 10, "J": 14, "K": 14, "L": 14,
        })
        if ws3.max_row >= 2:
            add_table(ws3, "InventoryDetail", 1, 1, ws3.max_row, 12)

        # -------- 4) Low Stock --------
        ws4 = wb.create_sheet("Low Stock")
        ws4.append(["ID", "Name", "Category", "Qty", "Min Stock", "Shortfall"])
        bold_row(ws4, 1)
        low = {m.id for m in self.inventory.low_stock_medicines()}
        for m in self.inventory.top_critical_stock(limit=len(low)):
            if m.id not in low:
                continue
            _append(ws4, [int(m.id), m.name, m.category, int(m.quantity), int(m.minimum_stock), int(m.minimum_stock - m.quantity)])
        set_widths(ws4, {"A": 6, "B": 28, "C": 18, "D": 8, "E": 10, "F": 10})

        wb.save(target)
