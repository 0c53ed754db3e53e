# routes/reports.py
import calendar
from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from config import settings as app_settings
from core import reports
from core.order_flow import OrderStatus
from database import get_db
from dependencies import get_store_settings
from models.users import User
from schemas.reports import (
    BasicStatsOut, CategoryShareOut, DashboardResponse, HourBucketOut,
    ReportSummaryResponse, ServiceShareOut, TopItemOut,
)
from schemas.settings import StoreSettingsOut
from services.orders import load_report_orders
from utils.pdf import annual_summary_pdf, monthly_summary_pdf
from utils.spreadsheet import (
    XLSX_MEDIA_TYPE, daily_ledger_xlsx, item_sales_xlsx, vat_return_xlsx,
)
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/reports", tags=["Reports"])

DEFAULT_RANGE_DAYS = 30


def _stats_out(stats: reports.BasicStats) -> BasicStatsOut:
    return BasicStatsOut(
        total_sales=round(stats.total_sales, 2),
        total_vat=round(stats.total_vat, 2),
        total_orders=stats.total_orders,
        avg_ticket=round(stats.avg_ticket, 2),
    )


def _top_out(items):
    return [TopItemOut(name=t.name, quantity=t.quantity, revenue=round(t.revenue, 2), image_url=t.image_url)
            for t in items]


def _mix_out(shares):
    return [CategoryShareOut(category=c.category, revenue=round(c.revenue, 2), percentage=c.percentage)
            for c in shares]


def _resolve_range(date_from: Optional[date], date_to: Optional[date]):
    date_to = date_to or date.today()
    date_from = date_from or (date_to - timedelta(days=DEFAULT_RANGE_DAYS))
    if date_from > date_to:
        raise HTTPException(status_code=422, detail="date_from must not be after date_to")
    return date_from, date_to


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# -----------------------------
# 1) Dashboard
# -----------------------------
@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    orders = load_report_orders(db, statuses=None, exclude=(OrderStatus.CANCELLED,))
    return DashboardResponse(
        stats=_stats_out(reports.basic_stats(orders)),
        top_items=_top_out(reports.top_items(orders)),
        category_mix=_mix_out(reports.category_mix(orders)),
    )


# -----------------------------
# 2) Completed orders in a date range
# -----------------------------
@router.get("/summary", response_model=ReportSummaryResponse)
def summary(
    date_from: Optional[date] = Query(None, description="Defaults to 30 days before date_to"),
    date_to: Optional[date] = Query(None, description="Inclusive, defaults to today"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    date_from, date_to = _resolve_range(date_from, date_to)
    orders = load_report_orders(db, date_from, date_to)
    return ReportSummaryResponse(
        date_from=date_from,
        date_to=date_to,
        stats=_stats_out(reports.basic_stats(orders)),
        top_items=_top_out(reports.top_items(orders)),
        category_mix=_mix_out(reports.category_mix(orders)),
        busy_hours=[HourBucketOut(hour=b.hour, count=b.count) for b in reports.busy_hours(orders)],
        service_split=[ServiceShareOut(name=s.name, value=s.value) for s in reports.service_option_split(orders)],
    )


# -----------------------------
# 3) Exports
# -----------------------------
@router.get("/export/annual.pdf")
def export_annual(
    year: int = Query(..., ge=2000, le=2100),
    store: StoreSettingsOut = Depends(get_store_settings),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    orders = load_report_orders(db, date(year, 1, 1), date(year, 12, 31))
    pdf = annual_summary_pdf(reports.monthly_breakdown(orders, year), year, store, app_settings.CURRENCY_LABEL)
    return _attachment(pdf, "application/pdf", f"Annual_Summary_{year}.pdf")


@router.get("/export/monthly.pdf")
def export_monthly(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    store: StoreSettingsOut = Depends(get_store_settings),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    last_day = calendar.monthrange(year, month)[1]
    orders = load_report_orders(db, date(year, month, 1), date(year, month, last_day))
    rows = reports.daily_breakdown(orders, year, month)
    pdf = monthly_summary_pdf(rows, year, month, store, app_settings.CURRENCY_LABEL)
    return _attachment(pdf, "application/pdf", f"Monthly_Summary_{year}_{month:02d}.pdf")


@router.get("/export/daily-ledger.xlsx")
def export_daily_ledger(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    date_from, date_to = _resolve_range(date_from, date_to)
    rows = reports.sales_ledger(load_report_orders(db, date_from, date_to))
    return _attachment(daily_ledger_xlsx(rows), XLSX_MEDIA_TYPE, f"Daily_Sales_{date_from}_{date_to}.xlsx")


@router.get("/export/vat-return.xlsx")
def export_vat_return(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    store: StoreSettingsOut = Depends(get_store_settings),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    date_from, date_to = _resolve_range(date_from, date_to)
    orders = load_report_orders(db, date_from, date_to)
    vat_pct = store.vat_percentage if store.vat_enabled else 0.0
    content = vat_return_xlsx(reports.vat_summary(orders, vat_pct), reports.sales_ledger(orders))
    return _attachment(content, XLSX_MEDIA_TYPE, f"VAT_Return_{date_from}_{date_to}.xlsx")


@router.get("/export/item-sales.xlsx")
def export_item_sales(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    date_from, date_to = _resolve_range(date_from, date_to)
    rows = reports.item_sales(load_report_orders(db, date_from, date_to))
    return _attachment(item_sales_xlsx(rows), XLSX_MEDIA_TYPE, f"Item_Sales_{date_from}_{date_to}.xlsx")
