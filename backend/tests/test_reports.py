from datetime import datetime

import pytest

from core import reports
from core.reports import ReportLine, ReportOrder


def order(total, vat=0.0, hour=12, service="delivery", lines=(), day=1, month=3, code="#100"):
    return ReportOrder(order_code=code, total=total, vat_amount=vat,
                       created_at=datetime(2026, month, day, hour, 30),
                       service_option=service, payment_method="cash",
                       customer_name="Jane", lines=tuple(lines))


class TestBasicStats:
    def test_totals_and_average(self):
        stats = reports.basic_stats([order(100, 15), order(50, 0)])
        assert stats.total_sales == 150
        assert stats.total_vat == 15
        assert stats.total_orders == 2
        assert stats.avg_ticket == 75


class TestEmptyInput:
    def test_every_aggregate_is_zeroed(self):
        stats = reports.basic_stats([])
        assert (stats.total_sales, stats.total_vat, stats.total_orders, stats.avg_ticket) == (0, 0, 0, 0)
        assert reports.top_items([]) == []
        assert reports.category_mix([]) == []
        assert [b.count for b in reports.busy_hours([])] == [0] * 24
        assert reports.service_option_split([]) == []
        assert all(r.orders == 0 for r in reports.monthly_breakdown([], 2026))
        assert len(reports.daily_breakdown([], 2026, 2)) == 28
        assert reports.sales_ledger([]) == []
        assert reports.vat_summary([], 15).total_sales == 0
        assert reports.item_sales([]) == []


class TestItems:
    orders = [
        order(40, lines=[ReportLine("Burger", 2, 15.0, addons_total=2.0, category="burgers"),
                         ReportLine("Fries", 1, 6.0, category="sides")]),
        order(30, lines=[ReportLine("Fries", 4, 6.0, category="sides"),
                         ReportLine("Mystery", 1, 4.0)]),
    ]

    def test_top_items_by_quantity(self):
        top = reports.top_items(self.orders)
        assert [(t.name, t.quantity) for t in top] == [("Fries", 5), ("Burger", 2), ("Mystery", 1)]
        assert top[1].revenue == pytest.approx(34.0)

    def test_top_items_limit(self):
        assert len(reports.top_items(self.orders, limit=1)) == 1

    def test_category_mix_falls_back_to_other(self):
        mix = {c.category: c for c in reports.category_mix(self.orders)}
        assert set(mix) == {"burgers", "sides", "other"}
        assert mix["sides"].revenue == pytest.approx(30.0)
        assert mix["burgers"].percentage == 50
        assert mix["other"].percentage == 6

    def test_item_sales_shares(self):
        rows = reports.item_sales(self.orders)
        assert rows[0].name == "Burger"
        assert rows[-1].category == "other"
        assert sum(r.share_percent for r in rows) == pytest.approx(100.0)


class TestTimeAndService:
    def test_busy_hours(self):
        buckets = reports.busy_hours([order(10, hour=12), order(10, hour=12), order(10, hour=19)])
        assert buckets[12].count == 2
        assert buckets[19].count == 1
        assert len(buckets) == 24

    def test_service_split_counts_missing_as_delivery(self):
        split = reports.service_option_split([order(10, service="pickup"), order(10, service=None),
                                              order(10, service="delivery")])
        assert [(s.name, s.value) for s in split] == [("delivery", 2), ("pickup", 1)]

    def test_monthly_breakdown(self):
        rows = reports.monthly_breakdown([order(10, month=3), order(20, month=3), order(5, month=11)], 2026)
        assert rows[2].label == "March"
        assert (rows[2].orders, rows[2].revenue) == (2, 30)
        assert rows[2].avg_ticket == 15
        assert rows[10].orders == 1

    def test_daily_breakdown_and_ledger(self):
        orders = [order(115, vat=15, day=3), order(20, day=3, code="#101")]
        days = reports.daily_breakdown(orders, 2026, 3)
        assert days[2].label == "03/03/2026"
        assert days[2].orders == 2
        ledger = reports.sales_ledger(orders)
        assert ledger[0].subtotal == pytest.approx(100)
        assert ledger[0].payment_method == "CASH"

    def test_vat_summary(self):
        summary = reports.vat_summary([order(115, vat=15), order(46, vat=6)], 15)
        assert summary.total_vat == pytest.approx(21)
        assert summary.taxable_sales == pytest.approx(140)
        assert summary.vat_percentage == 15
