from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.database.connection import get_db
from storefront.dependencies.auth import require_auth
from storefront.enums.catalog import AuctionStatus
from storefront.models.product import Product
from storefront.models.user import User
from storefront.schemas.bid import (
    AuctionDetail,
    AuctionSummary,
    BidCreate,
    BidResponse,
    PlaceBidResponse,
)
from storefront.services.bidding import (
    auction_status,
    list_auctions,
    list_bids,
    minimum_acceptable_bid,
    place_bid,
    winning_bid,
)
from storefront.services.product_service import get_product_or_404

router = APIRouter(prefix="/auctions", tags=["Auctions"])


def _summary_fields(product: Product, now: datetime) -> dict:
    return dict(
        product_id=product.product_id,
        name=product.name,
        image=product.image,
        status=auction_status(product, now),
        starting_bid=product.starting_bid,
        current_bid=product.current_bid,
        minimum_bid_increment=product.minimum_bid_increment,
        minimum_next_bid=minimum_acceptable_bid(product),
        bid_count=product.bid_count,
        auction_start_date=product.auction_start_date,
        auction_end_date=product.auction_end_date,
    )


# ---------- LIST AUCTIONS ----------

@router.get("/", response_model=List[AuctionSummary])
def list_auctions_route(
    status: Optional[AuctionStatus] = None,
    db: Session = Depends(get_db),
):
    now = datetime.utcnow()
    return [AuctionSummary(**_summary_fields(p, now)) for p in list_auctions(db, status, now)]


# ---------- AUCTION DETAIL ----------

@router.get("/{product_id}", response_model=AuctionDetail)
def get_auction_route(product_id: str, db: Session = Depends(get_db)):
    product = get_product_or_404(db, product_id)
    if not product.is_auction:
        raise HTTPException(status_code=404, detail="Auction not found")

    now = datetime.utcnow()
    winner = winning_bid(product)
    return AuctionDetail(
        **_summary_fields(product, now),
        description=product.description,
        winning_bid=BidResponse.model_validate(winner) if winner else None,
        bids=[BidResponse.model_validate(b) for b in list_bids(db, product_id)],
    )


# ---------- BID HISTORY ----------

@router.get("/{product_id}/bids", response_model=List[BidResponse])
def bid_history_route(product_id: str, db: Session = Depends(get_db)):
    return list_bids(db, product_id)


# ---------- PLACE BID ----------

@router.post("/{product_id}/bids", response_model=PlaceBidResponse, status_code=201)
def place_bid_route(
    product_id: str,
    body: BidCreate,
    user: User = Depends(require_auth),
    db: Session = Depends(get_db),
):
    bid, product = place_bid(db, product_id, user, body.amount)
    return PlaceBidResponse(
        bid=BidResponse.model_validate(bid),
        current_bid=product.current_bid,
        minimum_next_bid=minimum_acceptable_bid(product),
        bid_count=product.bid_count,
    )
