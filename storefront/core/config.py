from typing import Literal

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # DB
    DATABASE_URL: str = "sqlite:///./storefront.db"

    # Security / JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    LOG_LEVEL: str = "INFO"

    # Checkout
    # "audit" keeps the client total for reference only, "reject" refuses the order
    ORDER_TOTAL_POLICY: Literal["audit", "reject"] = "audit"
    ORDER_TOTAL_TOLERANCE: float = 0.01
    ORDER_INITIAL_STATUS: str = "processing"
    DEFAULT_COUNTRY: str = "Iraq"
    DEFAULT_PAYMENT_METHOD: str = "cash_on_delivery"
    DEFAULT_SHIPPING_METHOD: str = "standard"

    # Catalog paging
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 200

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
