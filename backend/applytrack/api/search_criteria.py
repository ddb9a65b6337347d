from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from applytrack.api.deps import get_connector_manager
from applytrack.auth import get_current_user
from applytrack.connectors.base import NoConnectorsConfiguredError
from applytrack.connectors.manager import ConnectorManager
from applytrack.database import get_db
from applytrack.models.search_criteria import JobSearchCriteria
from applytrack.models.user import User
from applytrack.schemas.search_criteria import (
    CriteriaRunOut,
    SearchCriteriaCreate,
    SearchCriteriaOut,
    SearchCriteriaUpdate,
)
from applytrack.services.job_scraper import JobScraperService


router = APIRouter()


def _get_owned_criteria(db: Session, criteria_id: int, user_id: int) -> JobSearchCriteria:
    criteria = (
        db.query(JobSearchCriteria)
        .filter(JobSearchCriteria.id == criteria_id, JobSearchCriteria.user_id == user_id)
        .first()
    )
    if not criteria:
        raise HTTPException(status_code=404, detail="Search criteria not found")
    return criteria


@router.get("", response_model=list[SearchCriteriaOut])
def list_criteria(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[JobSearchCriteria]:
    return (
        db.query(JobSearchCriteria)
        .filter(JobSearchCriteria.user_id == current_user.id)
        .order_by(JobSearchCriteria.created_at.desc(), JobSearchCriteria.id.desc())
        .all()
    )


@router.post("", response_model=SearchCriteriaOut, status_code=201)
def create_criteria(
    payload: SearchCriteriaCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> JobSearchCriteria:
    criteria = JobSearchCriteria(user_id=current_user.id, **payload.model_dump())
    db.add(criteria)
    db.commit()
    db.refresh(criteria)
    return criteria


@router.get("/{criteria_id}", response_model=SearchCriteriaOut)
def get_criteria(
    criteria_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> JobSearchCriteria:
    return _get_owned_criteria(db, criteria_id, current_user.id)


@router.put("/{criteria_id}", response_model=SearchCriteriaOut)
def update_criteria(
    criteria_id: int,
    payload: SearchCriteriaUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> JobSearchCriteria:
    criteria = _get_owned_criteria(db, criteria_id, current_user.id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(criteria, key, value)

    if criteria.salary_min is not None and criteria.salary_max is not None and criteria.salary_min > criteria.salary_max:
        db.rollback()
        raise HTTPException(status_code=422, detail="salary_min must not exceed salary_max")
    if not (criteria.keywords or criteria.job_titles):
        db.rollback()
        raise HTTPException(status_code=422, detail="at least one keyword or job title is required")

    db.add(criteria)
    db.commit()
    db.refresh(criteria)
    return criteria


@router.delete("/{criteria_id}")
def delete_criteria(
    criteria_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, str | int]:
    criteria = _get_owned_criteria(db, criteria_id, current_user.id)
    db.delete(criteria)
    db.commit()
    return {"status": "deleted", "criteria_id": criteria_id}


@router.post("/{criteria_id}/scrape", response_model=CriteriaRunOut)
async def scrape_criteria(
    criteria_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    manager: ConnectorManager = Depends(get_connector_manager),
) -> CriteriaRunOut:
    _get_owned_criteria(db, criteria_id, current_user.id)
    service = JobScraperService(db, current_user.id, manager)
    try:
        result = await service.run_scrape_for_criteria(criteria_id)
    except NoConnectorsConfiguredError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return CriteriaRunOut(**asdict(result))
