from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from applytrack.auth import create_access_token, get_current_user, hash_password, verify_password
from applytrack.database import get_db
from applytrack.models.user import User
from applytrack.schemas.auth import AuthResponse, CredentialsUpdate, LoginRequest, MeResponse, RegisterRequest


router = APIRouter()


def _me(user: User) -> MeResponse:
    return MeResponse(
        id=user.id,
        username=user.username,
        has_adzuna_credentials=bool(user.adzuna_app_id and user.adzuna_api_key),
    )


@router.post("/register", response_model=AuthResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    username = payload.username.strip().lower()
    if not username:
        raise HTTPException(status_code=400, detail="Username is required")

    existing = db.query(User).filter(User.username == username).first()
    if existing:
        raise HTTPException(status_code=409, detail="Username already exists")

    user = User(username=username, password_hash=hash_password(payload.password))
    db.add(user)
    db.commit()
    db.refresh(user)

    return AuthResponse(access_token=create_access_token(user.id), username=user.username)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    username = payload.username.strip().lower()
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account disabled")

    return AuthResponse(access_token=create_access_token(user.id), username=user.username)


@router.get("/me", response_model=MeResponse)
def me(current_user: User = Depends(get_current_user)) -> MeResponse:
    return _me(current_user)


@router.put("/credentials", response_model=MeResponse)
def update_credentials(
    payload: CredentialsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MeResponse:
    # An empty string clears the stored value; omitted fields stay untouched.
    if payload.adzuna_app_id is not None:
        current_user.adzuna_app_id = payload.adzuna_app_id.strip() or None
    if payload.adzuna_api_key is not None:
        current_user.adzuna_api_key = payload.adzuna_api_key.strip() or None
    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return _me(current_user)
