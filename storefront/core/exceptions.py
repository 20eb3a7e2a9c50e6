# storefront/core/exceptions.py
"""
Error kinds raised by the storefront services.

Every error is an HTTPException so FastAPI serializes it directly. The detail
payload always carries ``message`` and ``error_code`` plus whatever corrected
value the caller needs to retry (minimum bid, authoritative price, stock...).
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class StorefrontError(HTTPException):
    status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "STOREFRONT_ERROR"

    def __init__(
        self,
        message: str,
        headers: Optional[Dict[str, str]] = None,
        **extra: Any,
    ):
        self.message = message
        self.extra = extra
        super().__init__(
            status_code=self.status_code,
            detail={"message": message, "error_code": self.error_code, **extra},
            headers=headers,
        )


# ---------- Authentication ----------

class AuthenticationRequired(StorefrontError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION_REQUIRED"

    def __init__(self, message: str = "Authentication required: no token provided"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthenticationInvalid(StorefrontError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION_INVALID"

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


# ---------- Lookups ----------

class ProductNotFound(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found", product_id=product_id)


class OrderNotFound(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "ORDER_NOT_FOUND"

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found", order_id=order_id)


# ---------- Bidding ----------

class AuctionNotActive(StorefrontError):
    error_code = "AUCTION_NOT_ACTIVE"

    def __init__(self, product_id: str, message: Optional[str] = None):
        self.product_id = product_id
        super().__init__(
            message or f"Auction for product {product_id} is not active",
            product_id=product_id,
        )


class InvalidBidAmount(StorefrontError):
    error_code = "INVALID_BID_AMOUNT"

    def __init__(self, amount: Any):
        super().__init__(f"Bid amount must be a positive number, got {amount!r}")


class BidTooLow(StorefrontError):
    error_code = "BID_TOO_LOW"

    def __init__(self, minimum: float):
        self.minimum = minimum
        super().__init__(f"Bid must be at least {minimum}", minimum=minimum)


class BidConflict(StorefrontError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "BID_CONFLICT"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(
            "Another bid was placed at the same time; please review and resubmit",
            product_id=product_id,
        )


class BidCommitFailed(StorefrontError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "BID_COMMIT_FAILED"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__("Failed to record bid; please try again", product_id=product_id)


# ---------- Checkout ----------

class InvalidOrderRequest(StorefrontError):
    error_code = "INVALID_ORDER_REQUEST"


class InvalidLineItem(StorefrontError):
    error_code = "INVALID_LINE_ITEM"

    def __init__(self, product_id: Optional[str], message: Optional[str] = None):
        self.product_id = product_id
        super().__init__(
            message
            or f"Invalid data for product {product_id}. Quantity must be positive and price must be a number.",
            product_id=product_id,
        )


class PriceMismatch(StorefrontError):
    error_code = "PRICE_MISMATCH"

    def __init__(self, product_id: str, name: str, correct_price: float, client_price: float):
        self.product_id = product_id
        self.correct_price = correct_price
        super().__init__(
            f"Price for {name} has changed. Expected {correct_price}, got {client_price}. Please review your cart.",
            product_id=product_id,
            correct_price=correct_price,
        )


class InsufficientStock(StorefrontError):
    error_code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: str, name: str, available_stock: int, requested: int):
        self.product_id = product_id
        self.available_stock = available_stock
        super().__init__(
            f"Not enough stock for {name}. Available: {available_stock}, Requested: {requested}.",
            product_id=product_id,
            available_stock=available_stock,
        )


class TotalMismatch(StorefrontError):
    error_code = "TOTAL_MISMATCH"

    def __init__(self, server_total: float, client_total: float):
        self.server_total = server_total
        super().__init__(
            f"Order total {client_total} does not match calculated total {server_total}",
            server_total=server_total,
        )


class OrderCommitFailed(StorefrontError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "ORDER_COMMIT_FAILED"

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__("Failed to process order; please try again", order_id=order_id)
