from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from storefront.core.exceptions import AuthenticationInvalid, AuthenticationRequired
from storefront.database.connection import get_db
from storefront.core.security import decode_access_token
from storefront.enums.catalog import UserRole
from storefront.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()

def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    if not token:
        raise AuthenticationRequired()

    token_data = decode_access_token(token)
    if not token_data.username:
        raise AuthenticationInvalid("Authentication required: invalid or expired token")

    user = get_user_by_username(db, token_data.username)
    if not user:
        raise AuthenticationInvalid("User not found")
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return user


def require_auth(user: User = Depends(get_current_user)) -> User:
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.admin.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return user
