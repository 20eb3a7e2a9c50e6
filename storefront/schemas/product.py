from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime, timezone
from typing import List, Optional

from storefront.enums.catalog import ProductSort

class ProductBase(BaseModel):
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    category: str
    brand: Optional[str] = None
    image: Optional[str] = None
    price: float = Field(ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    stock: int = Field(ge=0)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    is_featured: bool = False
    is_active: bool = True

    is_auction: bool = False
    starting_bid: float = Field(default=0.0, ge=0)
    minimum_bid_increment: float = Field(default=0.0, ge=0)
    auction_start_date: Optional[datetime] = None
    auction_end_date: Optional[datetime] = None

    @field_validator("auction_start_date", "auction_end_date")
    @classmethod
    def to_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # columns are naive UTC; offset-aware input is converted, naive input is taken as UTC
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @model_validator(mode="after")
    def check_auction_window(self):
        if not self.is_auction:
            return self
        if self.auction_start_date is None or self.auction_end_date is None:
            raise ValueError("Auction products need both auction_start_date and auction_end_date")
        if self.auction_end_date <= self.auction_start_date:
            raise ValueError("auction_end_date must be after auction_start_date")
        return self

class ProductCreate(ProductBase):
    product_id: str

class ProductUpdate(ProductBase):
    pass

class ProductResponse(ProductBase):
    product_id: str
    current_bid: float
    bid_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProductFilters(BaseModel):
    category_ids: List[str] = []
    brand_names: List[str] = []
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    in_stock: bool = False
    search_term: Optional[str] = None
    sort_by: ProductSort = ProductSort.featured
    page: int = 1
    limit: Optional[int] = None


class ProductPage(BaseModel):
    items: List[ProductResponse]
    total_products: int
    total_pages: int
    current_page: int
