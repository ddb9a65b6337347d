from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from applytrack.auth import get_current_user
from applytrack.database import get_db
from applytrack.models.external_log import ExternalLog
from applytrack.models.user import User
from applytrack.schemas.external_log import ExternalLogListOut, ExternalLogOut


router = APIRouter()


@router.get("", response_model=ExternalLogListOut)
def list_external_logs(
    service: str | None = Query(default=None),
    success: bool | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ExternalLogListOut:
    query = db.query(ExternalLog).filter(ExternalLog.user_id == current_user.id)
    if service:
        query = query.filter(ExternalLog.service == service)
    if success is not None:
        query = query.filter(ExternalLog.success == success)

    total = query.count()
    rows = query.order_by(ExternalLog.created_at.desc(), ExternalLog.id.desc()).offset(offset).limit(limit).all()
    return ExternalLogListOut(
        total=total,
        limit=limit,
        offset=offset,
        logs=[ExternalLogOut.model_validate(row) for row in rows],
    )


@router.get("/{log_id}", response_model=ExternalLogOut)
def get_external_log(
    log_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ExternalLog:
    row = db.query(ExternalLog).filter(ExternalLog.id == log_id, ExternalLog.user_id == current_user.id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Log entry not found")
    return row
