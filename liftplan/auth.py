import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlmodel import Session as DBSession

from .db import get_session
from .models import User

# ---- cookie config (use SAME values for set & delete) ----
ACCESS_COOKIE  = "access_token"
COOKIE_PATH    = "/"
COOKIE_SECURE  = os.getenv("COOKIE_SECURE", "false").lower() == "true"

# ---- token config ----
JWT_SECRET = os.getenv("JWT_SECRET", "CHANGE_ME_to_a_long_random_secret")
JWT_ALG    = "HS256"
JWT_TTL    = timedelta(hours=int(os.getenv("JWT_TTL_HOURS", "12")))

# ---- password hashing ----
pwd_ctx = CryptContext(schemes=["argon2"], deprecated="auto")

def hash_pw(p: str) -> str:
    return pwd_ctx.hash(p)

def verify_pw(p: str, h: str) -> bool:
    return pwd_ctx.verify(p, h)

# ---- JWT helpers ----
def make_token(user_id: int) -> str:
    now = datetime.now(tz=timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + JWT_TTL).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)

def read_token(token: str) -> int:
    try:
        data = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
        return int(data.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired token")

# ---- dependencies ----
def get_optional_user(request: Request, db: DBSession = Depends(get_session)) -> Optional[User]:
    """Read paths: no session means "no data", never an error."""
    token = request.cookies.get(ACCESS_COOKIE)
    if not token:
        return None
    try:
        user_id = read_token(token)
    except HTTPException:
        return None
    return db.get(User, user_id)

def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Write paths: a missing session is a hard failure."""
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
