# storefront/services/analytics_service.py
from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import List, Tuple

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import AnalyticsOut, MonthlyRevenue, TopProduct
from storefront.repos.order_repo import OrderRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MONTHS_BACK = 6
TOP_PRODUCTS = 5


def month_buckets(now: datetime, count: int = MONTHS_BACK) -> List[Tuple[int, int]]:
    """Ostatnie `count` miesiecy kalendarzowych, od najstarszego, lacznie z biezacym."""
    year, month = now.year, now.month
    buckets = []
    for _ in range(count):
        buckets.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(buckets))


def growth_percentage(previous: int, current: int) -> float | None:
    if previous == 0:
        return None
    return round((current - previous) / previous * 100, 1)


class AnalyticsService:
    """
    Liczby do panelu admina, liczone z tabeli orders.
    Anulowane zamowienia nie licza sie do przychodu.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def dashboard(self, now: datetime | None = None, currency: str = "USD") -> AnalyticsOut:
        now = now or datetime.now(timezone.utc)
        orders = self.repo.list_orders()
        paid = [o for o in orders if o.status != OrderStatus.CANCELLED.value]
        # kwot w roznych walutach nie sumujemy - przychod tylko w walucie sklepu
        counted = [o for o in paid if (o.currency or "").lower() == currency.lower()]
        if len(counted) < len(paid):
            logger.info(f"Analytics: {len(paid) - len(counted)} orders in other currencies left out of revenue")

        total_revenue = sum(o.total for o in counted)
        customers = {o.customer_email.lower() for o in paid if o.customer_email}

        buckets = month_buckets(now)
        revenue_by_month = defaultdict(int)
        for o in counted:
            created = o.created_at
            revenue_by_month[(created.year, created.month)] += o.total

        monthly = [
            MonthlyRevenue(
                month=datetime(year, month, 1).strftime("%b %Y"),
                revenue=revenue_by_month[(year, month)],
            )
            for year, month in buckets
        ]

        # wzrost: biezacy miesiac vs poprzedni, oba z tej samej listy kubelkow
        growth = growth_percentage(monthly[-2].revenue, monthly[-1].revenue)

        return AnalyticsOut(
            currency=currency,
            total_revenue=total_revenue,
            orders_count=len(orders),
            customers_count=len(customers),
            average_order_value=total_revenue // len(counted) if counted else 0,
            monthly_revenue=monthly,
            growth_percentage=growth,
            status_counts=dict(Counter(o.status for o in orders)),
            top_products=self._top_products(counted),
        )

    @staticmethod
    def _top_products(orders: List[OrderModel]) -> List[TopProduct]:
        units = Counter()
        revenue = Counter()
        for o in orders:
            for item in o.items or []:
                name = item.get("name") or "Unknown"
                units[name] += item.get("quantity") or 0
                revenue[name] += item.get("price") or 0
        return [
            TopProduct(name=name, units=count, revenue=revenue[name])
            for name, count in units.most_common(TOP_PRODUCTS)
        ]
