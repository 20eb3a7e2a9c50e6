from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime

from storefront.database.connection import get_db
from storefront.dependencies.auth import require_admin
from storefront.schemas.system import HealthCheckResponse, SystemMetricsResponse
from storefront.models.order import Order
from storefront.models.product import Bid, Product

router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthCheckResponse)
def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Lightweight public health check.
    Returns ok + DB connectivity check (SELECT 1).
    """
    now = datetime.utcnow()
    start_time = getattr(request.app.state, "start_time", now)
    uptime_seconds = (now - start_time).total_seconds()

    db_ok = True
    extra = {}
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db_ok = False
        extra["db_error"] = str(e)

    status = "ok" if db_ok else "degraded"

    return HealthCheckResponse(
        status=status,
        now=now,
        uptime_seconds=uptime_seconds,
        db_ok=db_ok,
        extra=extra or None,
    )


@router.get("/metrics", response_model=SystemMetricsResponse, dependencies=[Depends(require_admin)])
def system_metrics(request: Request, db: Session = Depends(get_db)):
    """
    Admin-only system metrics in JSON form.
    Uses in-process counters stored on app.state.metrics and DB-derived metrics.
    """
    now = datetime.utcnow()
    start_time = getattr(request.app.state, "start_time", now)
    uptime_seconds = (now - start_time).total_seconds()

    metrics = getattr(request.app.state, "metrics", None) or {}
    requests_count = int(metrics.get("requests", 0))
    total_response_ms = float(metrics.get("total_response_ms", 0.0))
    avg_response_ms = (total_response_ms / requests_count) if requests_count > 0 else None

    active_auctions = (
        db.query(func.count())
        .select_from(Product)
        .filter(
            Product.is_auction.is_(True),
            Product.auction_start_date <= now,
            Product.auction_end_date > now,
        )
        .scalar()
    ) or 0

    total_bids = db.query(func.count()).select_from(Bid).scalar() or 0

    start_today = datetime.combine(now.date(), datetime.min.time())
    total_orders_today = (
        db.query(func.count())
        .select_from(Order)
        .filter(Order.created_at >= start_today)
        .scalar()
    ) or 0

    total_orders = db.query(func.count()).select_from(Order).scalar() or 0

    average_order_value = db.query(func.avg(Order.total)).scalar()
    if average_order_value is not None:
        average_order_value = float(average_order_value)

    return SystemMetricsResponse(
        uptime_seconds=uptime_seconds,
        now=now,
        requests_count=requests_count,
        avg_response_ms=avg_response_ms,
        error_responses=int(metrics.get("error_responses", 0)),
        active_auctions=int(active_auctions),
        total_bids=int(total_bids),
        total_orders_today=int(total_orders_today),
        total_orders=int(total_orders),
        average_order_value=average_order_value,
    )
