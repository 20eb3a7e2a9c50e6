from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.enums.catalog import AuctionStatus


class BidCreate(BaseModel):
    amount: float = Field(allow_inf_nan=False)


class BidResponse(BaseModel):
    id: int
    product_id: str
    amount: float
    user_id: str
    user_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PlaceBidResponse(BaseModel):
    bid: BidResponse
    current_bid: float
    minimum_next_bid: float
    bid_count: int


class AuctionSummary(BaseModel):
    product_id: str
    name: str
    image: Optional[str] = None
    status: AuctionStatus
    starting_bid: float
    current_bid: float
    minimum_bid_increment: float
    minimum_next_bid: float
    bid_count: int
    auction_start_date: Optional[datetime] = None
    auction_end_date: Optional[datetime] = None


class AuctionDetail(AuctionSummary):
    description: Optional[str] = None
    winning_bid: Optional[BidResponse] = None
    bids: List[BidResponse] = []
