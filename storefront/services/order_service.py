import math
import time
import uuid
from datetime import datetime
from numbers import Real
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.exceptions import (
    InsufficientStock,
    InvalidLineItem,
    InvalidOrderRequest,
    OrderCommitFailed,
    OrderNotFound,
    PriceMismatch,
    ProductNotFound,
    TotalMismatch,
)
from storefront.core.logger import logger
from storefront.models.order import Order, OrderItem
from storefront.models.product import Product
from storefront.models.user import User
from storefront.schemas.order import CartItemIn, ShippingDetails


class _StockConflict(Exception):
    def __init__(self, product_id: str):
        super().__init__(f"Guarded stock decrement missed for {product_id}")
        self.product_id = product_id


def generate_order_id() -> str:
    return f"ORD-S-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6].upper()}"


def _is_number(value) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _is_quantity(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return isinstance(value, int) and value > 0


# ---------- VALIDATION ----------

def validate_cart(
    db: Session,
    cart_items: Sequence[CartItemIn],
) -> Tuple[List[OrderItem], float, Dict[str, int]]:
    """
    Re-derive every cart line from the authoritative product rows.

    Returns the order item snapshots, the subtotal and the quantity to take
    off each product's stock. Raises on the first bad line; nothing is
    written here.
    """
    items: List[OrderItem] = []
    decrements: Dict[str, int] = {}
    subtotal = 0.0

    for position, line in enumerate(cart_items):
        if not line.product_id or not _is_quantity(line.quantity) or not _is_number(line.price):
            logger.warning(f"Invalid cart line {line.product_id!r}: price={line.price!r}, quantity={line.quantity!r}")
            raise InvalidLineItem(line.product_id or line.name)
        quantity = int(line.quantity)

        product = db.query(Product).filter(Product.product_id == line.product_id).first()
        if not product:
            logger.warning(f"Cart line references unknown product {line.product_id}")
            raise ProductNotFound(line.product_id)

        if product.price != line.price:
            logger.warning(f"Stale price for {product.product_id}: cart {line.price}, catalog {product.price}")
            raise PriceMismatch(product.product_id, product.name, product.price, line.price)

        requested = decrements.get(product.product_id, 0) + quantity
        if product.stock < requested:
            logger.warning(f"Insufficient stock for {product.product_id}: requested {requested}, available {product.stock}")
            raise InsufficientStock(product.product_id, product.name, product.stock, requested)

        line_total = product.price * quantity
        subtotal += line_total

        items.append(
            OrderItem(
                position=position,
                product_id=product.product_id,
                name=product.name,
                price=product.price,
                quantity=quantity,
                total=line_total,
                image=line.image or product.image,
            )
        )
        decrements[product.product_id] = requested

    return items, subtotal, decrements


def _reconcile_declared_total(server_total: float, client_total: Optional[float]):
    if client_total is None:
        return
    if abs(server_total - client_total) <= settings.ORDER_TOTAL_TOLERANCE:
        return
    if settings.ORDER_TOTAL_POLICY == "reject":
        raise TotalMismatch(server_total, client_total)
    logger.warning(
        f"Client total {client_total} differs from server total {server_total}; keeping server total"
    )


def _address_snapshot(details: ShippingDetails) -> dict:
    return {
        "name": details.name,
        "address": details.address,
        "city": details.city,
        "postal_code": details.postal_code,
        "country": details.country or settings.DEFAULT_COUNTRY,
    }


# ---------- CREATE ORDER ----------

def create_order(
    db: Session,
    buyer: User,
    shipping_details: ShippingDetails,
    cart_items: Sequence[CartItemIn],
    declared_shipping_cost,
    declared_total=None,
    now: Optional[datetime] = None,
) -> Order:
    if not cart_items:
        raise InvalidOrderRequest("Missing required order information.")
    if not _is_number(declared_shipping_cost) or declared_shipping_cost < 0:
        raise InvalidOrderRequest("Invalid shipping cost.")
    if declared_total is not None and (not _is_number(declared_total) or declared_total < 0):
        raise InvalidOrderRequest("Invalid client total.")

    items, subtotal, decrements = validate_cart(db, cart_items)

    shipping = float(declared_shipping_cost)
    discount = 0.0
    total = subtotal + shipping - discount
    _reconcile_declared_total(total, declared_total)

    order_id = generate_order_id()
    shipping_address = _address_snapshot(shipping_details)
    billing_address = {
        **shipping_address,
        "email": shipping_details.email or buyer.email,
        "phone": shipping_details.phone,
    }

    order = Order(
        order_id=order_id,
        customer_id=str(buyer.id),
        customer_name=buyer.full_name or shipping_details.name,
        customer_email=buyer.email or shipping_details.email,
        customer_phone=shipping_details.phone,
        status=settings.ORDER_INITIAL_STATUS,
        payment_method=settings.DEFAULT_PAYMENT_METHOD,
        shipping_method=settings.DEFAULT_SHIPPING_METHOD,
        shipping_address=shipping_address,
        billing_address=billing_address,
        subtotal=subtotal,
        shipping=shipping,
        discount=discount,
        total=total,
        client_declared_total=declared_total,
        created_at=now or datetime.utcnow(),
        items=items,
    )

    try:
        db.add(order)
        for product_id, qty in decrements.items():
            upd = (
                update(Product)
                .where(
                    Product.product_id == product_id,
                    Product.stock >= qty,
                )
                .values(
                    stock=Product.stock - qty,
                    version=Product.version + 1,
                )
                .execution_options(synchronize_session=False)
            )
            res = db.execute(upd)
            if res.rowcount != 1:
                raise _StockConflict(product_id)
        db.commit()
    except (_StockConflict, SQLAlchemyError) as e:
        db.rollback()
        logger.exception(f"Failed to commit order {order_id}: {e}")
        raise OrderCommitFailed(order_id) from e

    db.refresh(order)
    logger.info(
        f"Order {order_id} created for customer {buyer.id}: "
        f"{len(items)} items, subtotal={subtotal}, total={total}"
    )
    return order


# ---------- READ ----------

def get_order(db: Session, order_id: str) -> Order:
    order = db.query(Order).filter(Order.order_id == order_id).first()
    if not order:
        raise OrderNotFound(order_id)
    return order


def list_customer_orders(db: Session, customer_id: str) -> List[Order]:
    return (
        db.query(Order)
        .filter(Order.customer_id == customer_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
