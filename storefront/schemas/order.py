from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, EmailStr


# ---------- Checkout input ----------

class ShippingDetails(BaseModel):
    name: str
    email: Optional[EmailStr] = None
    phone: str
    city: str
    address: str
    postal_code: str = ""
    country: Optional[str] = None


class CartItemIn(BaseModel):
    # price and quantity are checked by the order service so that a bad
    # line is reported as INVALID_LINE_ITEM instead of a schema error
    product_id: str
    name: Optional[str] = None
    price: Any = None
    quantity: Any = None
    image: Optional[str] = None


class CreateOrderRequest(BaseModel):
    shipping_details: ShippingDetails
    cart_items: List[CartItemIn]
    shipping_cost: float
    client_total: Optional[float] = None


# ---------- Persisted order ----------

class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    price: float
    quantity: int
    total: float
    image: Optional[str] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    status: str
    payment_method: Optional[str] = None
    shipping_method: Optional[str] = None
    shipping_address: Dict[str, Any] = {}
    billing_address: Dict[str, Any] = {}
    items: List[OrderItemResponse]
    subtotal: float
    shipping: float
    discount: float
    total: float
    client_declared_total: Optional[float] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CreateOrderResponse(BaseModel):
    message: str = "Order created successfully."
    order_id: str
    order: OrderResponse
