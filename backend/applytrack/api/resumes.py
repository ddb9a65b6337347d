from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from applytrack.auth import get_current_user
from applytrack.database import get_db
from applytrack.models.application import Application
from applytrack.models.cover_letter import CoverLetter
from applytrack.models.resume import Resume
from applytrack.models.user import User
from applytrack.schemas.cover_letter import CoverLetterOut
from applytrack.schemas.resume import ResumeCreate, ResumeOut, ResumeSetActiveRequest, ResumeUpdate


router = APIRouter()


def _get_owned_resume(db: Session, resume_id: int, user_id: int) -> Resume:
    resume = db.query(Resume).filter(Resume.id == resume_id, Resume.user_id == user_id).first()
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")
    return resume


@router.get("", response_model=list[ResumeOut])
def list_resumes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[Resume]:
    return (
        db.query(Resume)
        .filter(Resume.user_id == current_user.id)
        .order_by(Resume.updated_at.desc(), Resume.id.desc())
        .all()
    )


@router.post("", response_model=ResumeOut, status_code=201)
def create_resume(
    payload: ResumeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Resume:
    # The first resume a user saves becomes the active one.
    has_resume = db.query(Resume.id).filter(Resume.user_id == current_user.id).first() is not None
    resume = Resume(
        user_id=current_user.id,
        name=payload.name.strip(),
        theme=payload.theme,
        json_data=payload.json_data.model_dump(mode="json", exclude_none=True),
        is_active=not has_resume,
    )
    db.add(resume)
    db.commit()
    db.refresh(resume)
    return resume


@router.get("/{resume_id}", response_model=ResumeOut)
def get_resume(
    resume_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Resume:
    return _get_owned_resume(db, resume_id, current_user.id)


@router.put("/{resume_id}", response_model=ResumeOut)
def update_resume(
    resume_id: int,
    payload: ResumeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Resume:
    resume = _get_owned_resume(db, resume_id, current_user.id)
    if payload.name is not None:
        resume.name = payload.name.strip()
    if payload.theme is not None:
        resume.theme = payload.theme
    if payload.json_data is not None:
        resume.json_data = payload.json_data.model_dump(mode="json", exclude_none=True)

    db.add(resume)
    db.commit()
    db.refresh(resume)
    return resume


@router.delete("/{resume_id}")
def delete_resume(
    resume_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, str | int]:
    resume = _get_owned_resume(db, resume_id, current_user.id)
    letter_ids = [row.id for row in db.query(CoverLetter.id).filter(CoverLetter.resume_id == resume.id).all()]
    db.query(Application).filter(Application.user_id == current_user.id, Application.resume_id == resume.id).update(
        {Application.resume_id: None}, synchronize_session=False
    )
    if letter_ids:
        db.query(Application).filter(Application.cover_letter_id.in_(letter_ids)).update(
            {Application.cover_letter_id: None}, synchronize_session=False
        )
    db.query(CoverLetter).filter(CoverLetter.resume_id == resume.id).delete(synchronize_session=False)
    db.delete(resume)
    db.commit()
    return {"status": "deleted", "resume_id": resume_id}


@router.put("/{resume_id}/set-active", response_model=ResumeOut)
def set_active_resume(
    resume_id: int,
    payload: ResumeSetActiveRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Resume:
    resume = _get_owned_resume(db, resume_id, current_user.id)

    if payload.is_active:
        db.query(Resume).filter(Resume.user_id == current_user.id, Resume.id != resume.id).update(
            {Resume.is_active: False}, synchronize_session=False
        )

    resume.is_active = payload.is_active
    db.add(resume)
    db.commit()
    db.refresh(resume)
    return resume


@router.get("/{resume_id}/export")
def export_resume(
    resume_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    resume = _get_owned_resume(db, resume_id, current_user.id)
    letters = (
        db.query(CoverLetter)
        .filter(CoverLetter.resume_id == resume.id, CoverLetter.user_id == current_user.id)
        .order_by(CoverLetter.id.asc())
        .all()
    )
    return {
        "name": resume.name,
        "theme": resume.theme,
        "resume": resume.json_data,
        "cover_letters": [CoverLetterOut.model_validate(letter).model_dump(mode="json") for letter in letters],
    }
