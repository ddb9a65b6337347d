from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from applytrack.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(120), unique=True, nullable=False, index=True)
    password_hash = Column(String(512), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    adzuna_app_id = Column(String(255))
    adzuna_api_key = Column(String(255))
    created_at = Column(DateTime, server_default=func.now())
