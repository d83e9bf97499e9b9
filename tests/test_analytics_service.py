from conftest import make_order, utc
from storefront.services.analytics_service import AnalyticsService, growth_percentage, month_buckets


def test_month_buckets_cross_year():
    assert month_buckets(utc(2026, 2)) == [
        (2025, 9), (2025, 10), (2025, 11), (2025, 12), (2026, 1), (2026, 2),
    ]


def test_growth_percentage():
    assert growth_percentage(1000, 1500) == 50.0
    assert growth_percentage(2000, 1000) == -50.0
    assert growth_percentage(0, 1000) is None


def test_dashboard(db):
    make_order(db, total=10000, customer_email="a@example.com", created_at=utc(2026, 9),
               items=[{"name": "iTag Pro", "quantity": 2, "price": 10000}])
    make_order(db, total=5000, customer_email="A@example.com", created_at=utc(2026, 10),
               items=[{"name": "iTag Mini", "quantity": 1, "price": 5000}])
    make_order(db, total=15000, customer_email="b@example.com", created_at=utc(2026, 10),
               items=[{"name": "iTag Mini", "quantity": 3, "price": 15000}])
    make_order(db, total=99999, status="cancelled", created_at=utc(2026, 10),
               items=[{"name": "iTag Ultra", "quantity": 9, "price": 99999}])
    make_order(db, total=20000, currency="eur", customer_email="c@example.com", created_at=utc(2026, 10),
               items=[{"name": "iTag Pro", "quantity": 4, "price": 20000}])

    result = AnalyticsService(db).dashboard(now=utc(2026, 10, 19), currency="USD")

    assert result.currency == "USD"
    assert result.total_revenue == 30000
    assert result.orders_count == 5
    assert result.customers_count == 3
    assert result.average_order_value == 10000
    assert [m.revenue for m in result.monthly_revenue] == [0, 0, 0, 0, 10000, 20000]
    assert result.monthly_revenue[-1].month == "Oct 2026"
    assert result.growth_percentage == 100.0
    assert result.status_counts == {"completed": 4, "cancelled": 1}
    assert [(p.name, p.units) for p in result.top_products] == [("iTag Mini", 4), ("iTag Pro", 2)]


def test_dashboard_empty(db):
    result = AnalyticsService(db).dashboard(now=utc(2026, 10))

    assert result.total_revenue == 0
    assert result.average_order_value == 0
    assert result.growth_percentage is None
    assert result.top_products == []
