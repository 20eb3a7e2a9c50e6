from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from storefront.database.connection import Base

class Product(Base):
    __tablename__ = "products"

    product_id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=True)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False, index=True)
    brand = Column(String, nullable=True, index=True)
    image = Column(String, nullable=True)

    price = Column(Float, nullable=False)
    discount_price = Column(Float, nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    rating = Column(Float, nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    # auction
    is_auction = Column(Boolean, nullable=False, default=False, index=True)
    starting_bid = Column(Float, nullable=False, default=0.0)
    minimum_bid_increment = Column(Float, nullable=False, default=0.0)
    # highest accepted bid, starting_bid while there are none
    current_bid = Column(Float, nullable=False, default=0.0)
    bid_count = Column(Integer, nullable=False, default=0)
    auction_start_date = Column(DateTime, nullable=True)
    auction_end_date = Column(DateTime, nullable=True)

    # bumped on every stock / bid write
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    bids = relationship(
        "Bid",
        back_populates="product",
        order_by="Bid.created_at.desc()",
        cascade="all, delete-orphan",
    )


class Bid(Base):
    __tablename__ = "bids"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(
        String, ForeignKey("products.product_id"), nullable=False, index=True
    )
    amount = Column(Float, nullable=False)
    user_id = Column(String, nullable=False, index=True)
    user_name = Column(String, nullable=True)
    user_phone = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    product = relationship("Product", back_populates="bids")
