from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from storefront.database.connection import get_db
from storefront.dependencies.auth import require_auth
from storefront.models.user import User
from storefront.schemas.user import UserCreate, UserResponse, UserUpdate, Token
from storefront.core.logger import logger
from storefront.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_refresh_token,
    create_refresh_token
)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(data: UserCreate, db: Session = Depends(get_db)):
    existing = db.query(User).filter(User.username == data.username).first()
    if existing:
        raise HTTPException(status_code=400, detail="Username already taken")

    user = User(
        username=data.username,
        email=data.email,
        full_name=data.full_name,
        phone=data.phone,
        hashed_password=get_password_hash(data.password),
        role=data.role.value,
    )

    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.username} ({user.role})")
    return user


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == form_data.username).first()

    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    access_token = create_access_token({"sub": user.username, "role": user.role})
    refresh_token = create_refresh_token({"sub": user.username, "role": user.role})

    return Token(access_token=access_token, refresh_token=refresh_token)

@router.post("/refresh", response_model=Token)
def refresh_token(refresh_token: str):
    payload = decode_refresh_token(refresh_token)

    if not payload.username:
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token")

    new_access = create_access_token(
        {"sub": payload.username, "role": payload.role}
    )

    return Token(access_token=new_access)


@router.get("/me", response_model=UserResponse)
def read_profile(user: User = Depends(require_auth)):
    return user


@router.put("/me", response_model=UserResponse)
def update_profile(
    data: UserUpdate,
    user: User = Depends(require_auth),
    db: Session = Depends(get_db),
):
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user
