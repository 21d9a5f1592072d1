from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from spendo.api.deps import get_current_user, get_db
from spendo.core.config import settings
from spendo.core.security import check_password, create_access_token, hash_password
from spendo.models.user import User
from spendo.schemas.auth import LoginRequest, ProfileUpdate, RegisterRequest, TokenResponse, UserMe

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_me(user: User) -> UserMe:
    return UserMe(id=user.id, email=user.email, name=user.name, phone=user.phone)


@router.post("/register", response_model=UserMe, status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> UserMe:
    email = payload.email.strip().lower()
    existing = db.scalar(select(User).where(User.email == email))
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        email=email,
        name=payload.name.strip(),
        phone=payload.phone,
        password_hash=hash_password(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user id=%s", user.id)
    return _user_me(user)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)) -> TokenResponse:
    user = db.scalar(select(User).where(User.email == payload.email.strip().lower()))
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    ok, new_hash = check_password(payload.password, user.password_hash)
    if not ok:
        logger.info("Failed login for user id=%s", user.id)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if new_hash:
        user.password_hash = new_hash
        db.add(user)
        db.commit()

    token = create_access_token(user.id)

    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=bool(settings.auth_cookie_secure),
        samesite=settings.auth_cookie_samesite,
        max_age=int(settings.jwt_expire_minutes) * 60,
        path="/",
    )

    return TokenResponse(access_token=token)


@router.post("/logout")
def logout(response: Response) -> dict:
    response.delete_cookie(key=settings.auth_cookie_name, path="/")
    return {"ok": True}


@router.get("/me", response_model=UserMe)
def me(current_user: User = Depends(get_current_user)) -> UserMe:
    return _user_me(current_user)


@router.get("/profile", response_model=UserMe)
def get_profile(current_user: User = Depends(get_current_user)) -> UserMe:
    return _user_me(current_user)


@router.put("/profile", response_model=UserMe)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserMe:
    if payload.email is not None:
        email = payload.email.strip().lower()
        if email != current_user.email:
            taken = db.scalar(select(User.id).where(User.email == email, User.id != current_user.id))
            if taken is not None:
                raise HTTPException(status_code=400, detail="Email already registered")
            current_user.email = email

    if payload.name is not None:
        name = payload.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Name must not be empty")
        current_user.name = name

    if payload.phone is not None:
        current_user.phone = payload.phone.strip() or None

    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return _user_me(current_user)
