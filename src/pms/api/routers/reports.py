from __future__ import annotations

from io import BytesIO

from fastapi import APIRouter, Depends, Response

from pms.api.deps import get_container
from pms.api.schemas import DashboardStatsOut, ReportSummaryOut
from pms.application.container import AppContainer

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

router = APIRouter(tags=["reports"])


@router.get("/dashboard/stats", response_model=DashboardStatsOut)
def dashboard_stats(container: AppContainer = Depends(get_container)):
    stats = container.dashboard.stats()
    return DashboardStatsOut(
        total_medicines=stats.total_medicines,
        low_stock_items=stats.low_stock_items,
        today_sales=float(stats.today_sales),
        active_customers=stats.active_customers,
    )


@router.get("/reports/summary", response_model=ReportSummaryOut)
def report_summary(container: AppContainer = Depends(get_container)):
    return ReportSummaryOut.from_record(container.reporting.summary())


@router.get("/reports/export")
def export_report(container: AppContainer = Depends(get_container)):
    buf = BytesIO()
    container.reporting.export_report_excel(buf)
    stamp = container.repo.clock().strftime("%Y%m%d")
    return Response(
        content=buf.getvalue(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="pharmacy-report-{stamp}.xlsx"'},
    )
