# schemas/reports.py
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class ReportBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class BasicStatsOut(ReportBase):
    total_sales: float
    total_vat: float
    total_orders: int
    avg_ticket: float


class TopItemOut(ReportBase):
    name: str
    quantity: int
    revenue: float
    image_url: Optional[str] = None


class CategoryShareOut(ReportBase):
    category: str
    revenue: float
    percentage: int


class HourBucketOut(ReportBase):
    hour: int
    count: int


class ServiceShareOut(ReportBase):
    name: str
    value: int


# Dashboard tiles (all non-cancelled orders)
class DashboardResponse(BaseModel):
    stats: BasicStatsOut
    top_items: List[TopItemOut]
    category_mix: List[CategoryShareOut]


# Reports page for completed orders in a date range
class ReportSummaryResponse(BaseModel):
    date_from: date
    date_to: date
    stats: BasicStatsOut
    top_items: List[TopItemOut]
    category_mix: List[CategoryShareOut]
    busy_hours: List[HourBucketOut]
    service_split: List[ServiceShareOut]
