from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from applytrack.api.scraped_jobs import job_payload
from applytrack.auth import get_current_user
from applytrack.database import get_db
from applytrack.models.cover_letter import CoverLetter
from applytrack.models.resume import Resume
from applytrack.models.scraped_job import ScrapedJob
from applytrack.models.user import User
from applytrack.schemas.cover_letter import CoverLetterGenerateRequest, CoverLetterOut
from applytrack.schemas.resume import ResumeDocument
from applytrack.services.cover_letter_generator import CoverLetterGenerator


logger = logging.getLogger(__name__)
router = APIRouter()
generator = CoverLetterGenerator()


@router.post("/generate", response_model=CoverLetterOut, status_code=201)
def generate_cover_letter(
    payload: CoverLetterGenerateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CoverLetter:
    if payload.tone not in generator.tones():
        raise HTTPException(status_code=400, detail=f"Unknown tone: {payload.tone}")

    resume = db.query(Resume).filter(Resume.id == payload.resume_id, Resume.user_id == current_user.id).first()
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")

    job = (
        db.query(ScrapedJob)
        .filter(ScrapedJob.id == payload.scraped_job_id, ScrapedJob.user_id == current_user.id)
        .first()
    )
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    content = generator.generate(
        resume=ResumeDocument.model_validate(resume.json_data),
        job_data=job_payload(job),
        tone=payload.tone,
        custom_intro=payload.custom_intro,
    )

    letter = CoverLetter(
        user_id=current_user.id,
        resume_id=resume.id,
        scraped_job_id=job.id,
        tone=payload.tone,
        content=content,
    )
    db.add(letter)
    db.commit()
    db.refresh(letter)
    logger.info("Generated %s cover letter %s for job %s", payload.tone, letter.id, job.id)
    return letter


@router.get("", response_model=list[CoverLetterOut])
def list_cover_letters(
    resume_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[CoverLetter]:
    query = db.query(CoverLetter).filter(CoverLetter.user_id == current_user.id)
    if resume_id is not None:
        query = query.filter(CoverLetter.resume_id == resume_id)
    return query.order_by(CoverLetter.id.desc()).all()


@router.get("/templates")
def list_templates(current_user: User = Depends(get_current_user)) -> list[str]:
    return generator.tones()
