# storefront/core/security.py
from datetime import datetime, timedelta
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from storefront.core.config import settings
from storefront.schemas.user import TokenData

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


# Password hashing
def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# Create Access Token
def create_access_token(data: dict, expires_minutes: Optional[int] = None):
    expire = datetime.utcnow() + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {**data, "exp": expire, "type": "access"}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# Create Refresh Token
def create_refresh_token(data: dict, expires_days: Optional[int] = None):
    expire = datetime.utcnow() + timedelta(
        days=expires_days or settings.REFRESH_TOKEN_EXPIRE_DAYS
    )
    payload = {**data, "exp": expire, "type": "refresh"}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# Base decode
def _decode_raw(token: str):
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def _decode_typed(token: str, token_type: str) -> TokenData:
    payload = _decode_raw(token)
    if not payload or payload.get("type") != token_type:
        return TokenData()
    return TokenData(username=payload.get("sub"), role=payload.get("role"))


# Decode Access Token
def decode_access_token(token: str) -> TokenData:
    return _decode_typed(token, "access")


# Decode Refresh Token
def decode_refresh_token(token: str) -> TokenData:
    return _decode_typed(token, "refresh")
