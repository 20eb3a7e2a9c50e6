from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.database.connection import get_db
from storefront.models.user import User
from storefront.schemas.analytics import (
    CustomerStatisticsResponse,
    RevenueByDayResponse,
)
from storefront.services.analytics_service import (
    get_customer_statistics,
    get_revenue_by_day,
)
from storefront.dependencies.auth import require_admin, require_auth

router = APIRouter(prefix="/analytics", tags=["Analytics & Reporting"])


@router.get("/me/statistics", response_model=CustomerStatisticsResponse)
def my_statistics(
    user: User = Depends(require_auth),
    db: Session = Depends(get_db),
):
    return get_customer_statistics(db, str(user.id))


@router.get("/reports/revenue-by-day", response_model=RevenueByDayResponse, dependencies=[Depends(require_admin)])
def revenue_by_day(
    db: Session = Depends(get_db),
):
    return get_revenue_by_day(db)
