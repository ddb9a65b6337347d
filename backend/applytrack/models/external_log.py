from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.types import JSON

from applytrack.database import Base


class ExternalLog(Base):
    __tablename__ = "external_logs"
    __table_args__ = (
        Index("idx_external_logs_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    service = Column(String(100), nullable=False)
    endpoint = Column(String(2000), nullable=False)
    method = Column(String(10), nullable=False)
    request_data = Column(JSON)
    response_status = Column(Integer)
    response_data = Column(JSON)
    response_time = Column(Integer, nullable=False)
    success = Column(Boolean, nullable=False)
    error_message = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
