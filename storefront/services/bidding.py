import math
from datetime import datetime
from numbers import Real
from typing import List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.exceptions import (
    AuctionNotActive,
    BidCommitFailed,
    BidConflict,
    BidTooLow,
    InvalidBidAmount,
)
from storefront.core.logger import logger
from storefront.enums.catalog import AuctionStatus
from storefront.models.product import Bid, Product
from storefront.models.user import User
from storefront.services.product_service import get_product_or_404


# ---------- AUCTION STATE ----------

def auction_status(product: Product, now: Optional[datetime] = None) -> AuctionStatus:
    """Auctions are active on the half-open window [start, end)."""
    now = now or datetime.utcnow()
    start = product.auction_start_date
    end = product.auction_end_date
    if start is not None and now < start:
        return AuctionStatus.upcoming
    if end is None or now >= end:
        return AuctionStatus.ended
    return AuctionStatus.active


def is_auction_active(product: Product, now: Optional[datetime] = None) -> bool:
    return (
        bool(product.is_auction)
        and product.auction_start_date is not None
        and product.auction_end_date is not None
        and auction_status(product, now) == AuctionStatus.active
    )


def minimum_acceptable_bid(product: Product) -> float:
    # current_bid holds starting_bid until the first bid lands
    return float(product.current_bid) + float(product.minimum_bid_increment)


def winning_bid(product: Product) -> Optional[Bid]:
    if not product.bids:
        return None
    return min(product.bids, key=lambda b: (-b.amount, b.created_at))


def list_bids(db: Session, product_id: str) -> List[Bid]:
    get_product_or_404(db, product_id)
    return (
        db.query(Bid)
        .filter(Bid.product_id == product_id)
        .order_by(Bid.created_at.desc(), Bid.id.desc())
        .all()
    )


def list_auctions(
    db: Session,
    status: Optional[AuctionStatus] = None,
    now: Optional[datetime] = None,
) -> List[Product]:
    now = now or datetime.utcnow()
    query = db.query(Product).filter(
        Product.is_auction.is_(True),
        Product.is_active.is_(True),
    )
    if status == AuctionStatus.active:
        query = query.filter(
            Product.auction_start_date <= now,
            Product.auction_end_date > now,
        )
    elif status == AuctionStatus.upcoming:
        query = query.filter(Product.auction_start_date > now)
    elif status == AuctionStatus.ended:
        query = query.filter(Product.auction_end_date <= now)
    return query.order_by(Product.auction_end_date.asc()).all()


# ---------- PLACE BID ----------

def _validate_amount(amount) -> float:
    if isinstance(amount, bool) or not isinstance(amount, Real):
        raise InvalidBidAmount(amount)
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidBidAmount(amount)
    return float(amount)


def place_bid(
    db: Session,
    product_id: str,
    bidder: User,
    amount,
    now: Optional[datetime] = None,
) -> Tuple[Bid, Product]:
    now = now or datetime.utcnow()

    product = get_product_or_404(db, product_id)
    if not is_auction_active(product, now):
        logger.warning(f"Bid on inactive auction {product_id} by user {bidder.id}")
        raise AuctionNotActive(product_id)

    amount = _validate_amount(amount)

    minimum = minimum_acceptable_bid(product)
    if amount < minimum:
        logger.warning(f"Bid {amount} on {product_id} below minimum {minimum}")
        raise BidTooLow(minimum)

    return commit_bid(db, product, bidder, amount, expected_version=product.version, now=now)


def commit_bid(
    db: Session,
    product: Product,
    bidder: User,
    amount: float,
    expected_version: int,
    now: datetime,
) -> Tuple[Bid, Product]:
    """
    Append the bid, guarded by the product version read at validation time.
    A concurrent writer makes the guarded update miss, and the bid is then
    re-evaluated against the fresh product row.
    """
    product_id = product.product_id

    upd = (
        update(Product)
        .where(
            Product.product_id == product_id,
            Product.version == expected_version,
            Product.current_bid + Product.minimum_bid_increment <= amount,
        )
        .values(
            current_bid=amount,
            bid_count=Product.bid_count + 1,
            version=Product.version + 1,
        )
        .execution_options(synchronize_session=False)
    )

    try:
        res = db.execute(upd)
        if res.rowcount != 1:
            db.rollback()
            _raise_for_lost_race(db, product_id, amount, now)

        bid = Bid(
            product_id=product_id,
            amount=amount,
            user_id=str(bidder.id),
            user_name=bidder.display_name,
            user_phone=bidder.phone,
            created_at=now,
        )
        db.add(bid)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Failed to commit bid on {product_id}: {e}")
        raise BidCommitFailed(product_id) from e

    db.refresh(bid)
    db.refresh(product)
    logger.info(f"Bid {amount} accepted on {product_id} from user {bidder.id}")
    return bid, product


def _raise_for_lost_race(db: Session, product_id: str, amount: float, now: datetime):
    fresh = get_product_or_404(db, product_id)
    if not is_auction_active(fresh, now):
        raise AuctionNotActive(product_id)
    minimum = minimum_acceptable_bid(fresh)
    if amount < minimum:
        logger.warning(f"Bid {amount} on {product_id} lost a race; minimum is now {minimum}")
        raise BidTooLow(minimum)
    logger.warning(f"Bid {amount} on {product_id} conflicted with a concurrent write")
    raise BidConflict(product_id)
