from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    DateTime,
    ForeignKey,
    JSON,
)
from sqlalchemy.orm import relationship

from storefront.database.connection import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String, unique=True, index=True, nullable=False)  # e.g. ORD-S-1718000000000-3FA2
    customer_id = Column(String, nullable=False, index=True)
    customer_name = Column(String, nullable=True)
    customer_email = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)

    status = Column(String, nullable=False, index=True)
    payment_method = Column(String, nullable=True)
    shipping_method = Column(String, nullable=True)

    # address snapshots, never references
    shipping_address = Column(JSON, default={})
    billing_address = Column(JSON, default={})

    subtotal = Column(Float, nullable=False)
    shipping = Column(Float, nullable=False, default=0.0)
    discount = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False)
    client_declared_total = Column(Float, nullable=True)  # audit only

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.position",
        cascade="all, delete-orphan",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(
        String, ForeignKey("orders.order_id"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)
    product_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False)
    total = Column(Float, nullable=False)
    image = Column(String, nullable=True)

    order = relationship("Order", back_populates="items")
