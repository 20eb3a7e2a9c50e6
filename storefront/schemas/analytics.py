from datetime import datetime, date
from typing import Optional, List
from pydantic import BaseModel


# ---------- Customer statistics ----------

class CustomerStatisticsResponse(BaseModel):
    customer_id: str
    total_orders: int
    total_spent: float
    average_order_value: float
    last_order_at: Optional[datetime] = None


# ---------- Revenue by day ----------

class RevenueByDayItem(BaseModel):
    date: date
    revenue: float
    orders: int


class RevenueByDayResponse(BaseModel):
    items: List[RevenueByDayItem]
