import pytest
from pydantic import ValidationError
from resume_data import RESUME

from applytrack.schemas.resume import ResumeDocument
from applytrack.services.matcher import JobMatcher


def test_skill_overlap_score():
    matcher = JobMatcher()

    score = matcher._skill_overlap_score(
        ["python", "sql", "docker"],
        ["python", "sql", "kubernetes", "aws"],
    )

    assert round(score, 3) == 0.533


def test_calculate_match_score_has_expected_fields():
    matcher = JobMatcher()
    job = {
        "title": "Senior Data Engineer",
        "description": "Need Python SQL Spark and AWS skills",
        "location": "Berlin, Germany",
    }

    result = matcher.calculate_match_score(ResumeDocument.model_validate(RESUME), job)

    assert 0.0 <= result["score"] <= 1.0
    assert {"python", "sql", "spark"} <= set(result["matched_skills"])
    assert result["missing_skills"] == ["aws"]
    assert result["breakdown"]["location_match"] == 1.0


def test_work_history_years_drive_experience_match():
    matcher = JobMatcher()
    resume = ResumeDocument.model_validate(RESUME)

    assert matcher._estimate_years(resume.work) == 5.0
    assert matcher._experience_level_match(resume.work, "Junior Analyst") == 0.65


def test_resume_requires_named_basics():
    with pytest.raises(ValidationError):
        ResumeDocument.model_validate({"basics": {"name": ""}})
    with pytest.raises(ValidationError):
        ResumeDocument.model_validate({"basics": {"name": "Jane"}, "skills": [{"level": "expert"}]})
