from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from spendo.core.config import settings
from spendo.core.months import is_canonical_month
from spendo.core.security import decode_access_token
from spendo.db.session import SessionLocal
from spendo.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)

ALL_TIME = "all-time"


def get_db() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    request: Request,
    cred: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    token: str | None = None
    if cred and cred.credentials:
        token = cred.credentials
    else:
        token = request.cookies.get(settings.auth_cookie_name)

    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        user_id = decode_access_token(token)
    except (JWTError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User inactive")
    return user


def ensure_month(value: str) -> str:
    if not is_canonical_month(value):
        raise HTTPException(status_code=400, detail="Invalid month format (YYYY-MM)")
    return value


def parse_month_scope(value: str) -> str | None:
    """Path values are either YYYY-MM or "all-time" (returned as None)."""

    if value == ALL_TIME:
        return None
    return ensure_month(value)
