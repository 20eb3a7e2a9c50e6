from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.database.connection import get_db
from storefront.dependencies.auth import require_auth
from storefront.enums.catalog import UserRole
from storefront.models.user import User
from storefront.schemas.order import (
    CreateOrderRequest,
    CreateOrderResponse,
    OrderResponse,
)
from storefront.services.order_service import (
    create_order,
    get_order,
    list_customer_orders,
)

router = APIRouter(prefix="/orders", tags=["Orders"])


# ---------- CHECKOUT ----------

@router.post("/", response_model=CreateOrderResponse, status_code=status.HTTP_201_CREATED)
def create_order_route(
    body: CreateOrderRequest,
    user: User = Depends(require_auth),
    db: Session = Depends(get_db),
):
    order = create_order(
        db=db,
        buyer=user,
        shipping_details=body.shipping_details,
        cart_items=body.cart_items,
        declared_shipping_cost=body.shipping_cost,
        declared_total=body.client_total,
    )
    return CreateOrderResponse(
        order_id=order.order_id,
        order=OrderResponse.model_validate(order),
    )


# ---------- ORDER HISTORY ----------

@router.get("/me", response_model=List[OrderResponse])
def my_orders_route(
    user: User = Depends(require_auth),
    db: Session = Depends(get_db),
):
    return list_customer_orders(db, str(user.id))


@router.get("/{order_id}", response_model=OrderResponse)
def get_order_route(
    order_id: str,
    user: User = Depends(require_auth),
    db: Session = Depends(get_db),
):
    order = get_order(db, order_id)
    if order.customer_id != str(user.id) and user.role != UserRole.admin.value:
        raise HTTPException(status_code=403, detail="Not allowed to view this order")
    return order
