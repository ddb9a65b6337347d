from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import time

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from applytrack.config import settings
from applytrack.database import get_db
from applytrack.models.user import User


security = HTTPBearer(auto_error=False)
HASH_SCHEME = "pbkdf2_sha256"


def _pbkdf2(password: str, salt: str, iterations: int) -> str:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations).hex()


def _sign(payload: str) -> str:
    return hmac.new(settings.auth_secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def hash_password(password: str) -> str:
    iterations = settings.password_hash_iterations
    salt = secrets.token_hex(16)
    return "$".join((HASH_SCHEME, str(iterations), salt, _pbkdf2(password, salt, iterations)))


def verify_password(password: str, password_hash: str) -> bool:
    parts = (password_hash or "").split("$")
    if len(parts) != 4 or parts[0] != HASH_SCHEME or not parts[1].isdigit():
        return False
    _, iterations, salt, digest = parts
    return hmac.compare_digest(_pbkdf2(password, salt, int(iterations)), digest)


def create_access_token(user_id: int, ttl_seconds: int | None = None) -> str:
    """Issue an opaque bearer token: ``user_id:expiry:nonce:signature``, base64url encoded."""
    ttl = settings.auth_token_ttl_seconds if ttl_seconds is None else ttl_seconds
    payload = f"{user_id}:{int(time.time()) + ttl}:{secrets.token_hex(6)}"
    raw = f"{payload}:{_sign(payload)}".encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_access_token(token: str) -> int | None:
    if not token:
        return None
    try:
        raw = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4)).decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        return None

    payload, _, signature = raw.rpartition(":")
    if not payload or not hmac.compare_digest(_sign(payload), signature):
        return None

    user_id, _, rest = payload.partition(":")
    expiry = rest.partition(":")[0]
    if not (user_id.isdigit() and expiry.isdigit()) or int(expiry) < time.time():
        return None
    return int(user_id)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

    user_id = decode_access_token(credentials.credentials)
    user = None
    if user_id is not None:
        user = db.query(User).filter(User.id == user_id, User.is_active == True).first()  # noqa: E712
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    return user
