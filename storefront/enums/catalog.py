from enum import Enum

class AuctionStatus(str, Enum):
    upcoming = "upcoming"
    active = "active"
    ended = "ended"


class ProductSort(str, Enum):
    featured = "featured"
    price_asc = "price-asc"
    price_desc = "price-desc"
    newest = "newest"
    rating = "rating"


class UserRole(str, Enum):
    user = "user"
    admin = "admin"
