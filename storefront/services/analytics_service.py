from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import func
from storefront.models.order import Order
from storefront.schemas.analytics import (
    CustomerStatisticsResponse,
    RevenueByDayResponse,
    RevenueByDayItem,
)


# ---------- CUSTOMER STATISTICS ----------

def get_customer_statistics(db: Session, customer_id: str) -> CustomerStatisticsResponse:
    row = (
        db.query(
            func.count(Order.id).label("total_orders"),
            func.sum(Order.total).label("total_spent"),
            func.max(Order.created_at).label("last_order_at"),
        )
        .filter(Order.customer_id == customer_id)
        .one()
    )

    total_orders = int(row.total_orders or 0)
    total_spent = float(row.total_spent or 0.0)
    average_order_value = total_spent / total_orders if total_orders else 0.0

    return CustomerStatisticsResponse(
        customer_id=customer_id,
        total_orders=total_orders,
        total_spent=total_spent,
        average_order_value=average_order_value,
        last_order_at=row.last_order_at,
    )


# ---------- REVENUE BY DAY ----------

def get_revenue_by_day(db: Session) -> RevenueByDayResponse:
    rows = (
        db.query(
            func.date(Order.created_at).label("day_str"),
            func.sum(Order.total).label("revenue"),
            func.count(Order.id).label("orders"),
        )
        .group_by(func.date(Order.created_at))
        .order_by("day_str")
        .all()
    )

    items: list[RevenueByDayItem] = []

    for row in rows:
        day_str = row.day_str
        revenue = row.revenue or 0

        if isinstance(day_str, str):
            d = date.fromisoformat(day_str)
        else:
            d = day_str.date() if hasattr(day_str, "date") else day_str

        items.append(
            RevenueByDayItem(
                date=d,
                revenue=float(revenue),
                orders=int(row.orders or 0),
            )
        )

    return RevenueByDayResponse(items=items)
