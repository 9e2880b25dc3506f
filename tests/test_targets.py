import unittest
from datetime import date, datetime
from salesdash.aggregation.targets import target_progress, default_target_window
from salesdash.aggregation.dashboard import dashboard_stats, distinct_reps
from salesdash.events.model import Event


def ev(**kw):
    base = dict(id="e", event_type="QUOTE", date=datetime(2025, 4, 2))
    base.update(kw)
    return Event(**base)


class TestTargets(unittest.TestCase):
    def test_monthly_rows_and_totals(self):
        events = [
            ev(id="1", event_type="ORDER", po_received=True, price=300, date=datetime(2025, 4, 10)),
            ev(id="2", event_type="ORDER", po_received=True, price=700, date=datetime(2025, 6, 1)),
            ev(id="3", quote_sent=True, price=2000, date=datetime(2025, 4, 3)),
            ev(id="4", event_type="ORDER", po_received=True, price=9999, date=datetime(2025, 7, 1)),
        ]
        window = (datetime(2025, 4, 1), datetime(2025, 6, 30, 23, 59, 59, 999000))
        p = target_progress(events, window, monthly_target=1000)
        self.assertEqual([r.month for r in p.rows], ["2025-04", "2025-05", "2025-06"])
        self.assertEqual(p.rows[0].order_value, 300)
        self.assertEqual(p.rows[0].quote_value, 2000)
        self.assertEqual(p.rows[1].order_value, 0)
        self.assertEqual(p.rows[1].variance, -1000)
        self.assertEqual(p.total_target, 3000)
        self.assertEqual(p.total_orders, 1000)
        self.assertEqual(p.total_variance, -2000)
        self.assertAlmostEqual(p.performance_pct, 100 / 3)
        self.assertEqual(p.achieved, 1000)
        self.assertEqual(p.remaining, 2000)

    def test_over_target(self):
        events = [ev(event_type="ORDER", po_received=True, price=5000)]
        p = target_progress(events, (datetime(2025, 4, 1), datetime(2025, 4, 30)), monthly_target=1000)
        self.assertEqual(p.achieved, 1000)
        self.assertEqual(p.remaining, 0)

    def test_zero_target(self):
        p = target_progress([], (datetime(2025, 4, 1), datetime(2025, 4, 30)), monthly_target=0)
        self.assertEqual(p.performance_pct, 0)

    def test_default_window(self):
        start, end = default_target_window(date(2025, 2, 14))
        self.assertEqual(start, datetime(2024, 11, 1))
        self.assertEqual(end.date(), date(2025, 2, 28))


class TestDashboardStats(unittest.TestCase):
    def test_cards(self):
        events = [
            ev(id="1", sales_representative="Clare", quote_sent=True, price=100),
            ev(id="2", sales_representative="Shaun", event_type="ORDER", po_received=True, price=40),
            ev(id="3", sales_representative=" ", event_type="CGI"),
            ev(id="4", sales_representative="Clare", quote_sent=True, status="Completed", price=900),
        ]
        stats = dashboard_stats(events, target_value=6_500_000)
        self.assertEqual(stats["sales_orders_value"], 40)
        self.assertEqual(stats["quotations_value"], 100)
        self.assertEqual(stats["csi_count"], 4)
        self.assertEqual(stats["target_value"], 6_500_000)
        self.assertEqual(stats["reps"], ["Clare", "Shaun"])

    def test_csi_count_floor(self):
        self.assertEqual(dashboard_stats([], 1.0)["csi_count"], 1)
        self.assertEqual(distinct_reps([]), [])


if __name__ == "__main__":
    unittest.main()
