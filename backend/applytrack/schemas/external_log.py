from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ExternalLogOut(BaseModel):
    id: int
    service: str
    endpoint: str
    method: str
    request_data: Any = None
    response_status: int | None = None
    response_data: Any = None
    response_time: int
    success: bool
    error_message: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class ExternalLogListOut(BaseModel):
    total: int
    limit: int
    offset: int
    logs: list[ExternalLogOut]
