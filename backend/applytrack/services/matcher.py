from __future__ import annotations

import math
import re
from collections import Counter
from datetime import datetime, timezone
from typing import Any

from applytrack.schemas.resume import ResumeDocument, WorkItem


STOP_WORDS = frozenset(
    "and or the for with our you your are will this that from have "
    "und oder die der das mit".split()
)

SKILL_ALIASES = {
    "js": "javascript",
    "ts": "typescript",
    "postgres": "postgresql",
    "k8s": "kubernetes",
    "g cloud": "gcp",
    "golang": "go",
    "powerbi": "power bi",
    "apache spark": "spark",
    "node.js": "nodejs",
}

_SKILL_GROUPS = (
    "python|java|javascript|typescript|sql|scala|go|rust|ruby|php|kotlin|swift|c\\+\\+|c#",
    "django|flask|fastapi|react|vue|angular|spring|rails|tensorflow|pytorch|node\\.js|nodejs|express",
    "aws|azure|gcp|docker|kubernetes|terraform|ansible",
    "spark|hadoop|kafka|airflow|dbt|pandas|numpy|etl|elt|data warehouse",
    "postgresql|mysql|mongodb|redis|elasticsearch|cassandra",
    "git|jenkins|jira|tableau|power bi|excel|graphql|rest",
)
JOB_SKILL_PATTERNS = tuple(re.compile(rf"\b({group})\b", re.IGNORECASE) for group in _SKILL_GROUPS)
TOKEN_PATTERN = re.compile(r"[A-Za-zäöüÄÖÜß\+\.#]{2,}")

# Weights of the components in the raw score; they sum to 1.
WEIGHTS = {"skill_match": 0.5, "keyword_match": 0.25, "experience_match": 0.15, "location_match": 0.1}
SENIOR_MARKERS = ("senior", "staff", "lead", "principal")
JUNIOR_MARKERS = ("junior", "entry", "graduate", "intern")
REMOTE_MARKERS = ("remote", "hybrid", "home office")


class JobMatcher:
    """Scores how well a JSON resume fits a stored job posting.

    The score is in ``[0, 1]``. Half of it comes from skill overlap between the
    resume's skills/keywords and the skills named in the posting; the rest from
    text similarity, seniority fit and location.
    """

    def calculate_match_score(self, resume: ResumeDocument, job_data: dict[str, Any]) -> dict[str, Any]:
        resume_skills = self._normalize_set(resume.skill_names())
        job_skills = self._extract_job_skills(job_data)
        matched = resume_skills & job_skills

        components = {
            "skill_match": self._skill_overlap_score(list(resume_skills), list(job_skills)),
            "keyword_match": self._keyword_similarity_score(
                resume.plain_text(),
                f"{job_data.get('title', '')} {job_data.get('description', '')}",
            ),
            "experience_match": self._experience_level_match(resume.work, job_data.get("title", "")),
            "location_match": self._location_match(resume, job_data.get("location", "")),
        }
        raw_total = sum(components[name] * weight for name, weight in WEIGHTS.items())

        # Spread out the low end without reordering high scores.
        score = min(1.0, max(0.03, raw_total)) ** 0.78
        if len(matched) >= 3:
            score = min(1.0, score + 0.05)

        breakdown = {name: round(value, 3) for name, value in components.items()}
        breakdown["raw_score"] = round(raw_total, 3)
        return {
            "score": round(float(score), 3),
            "matched_skills": sorted(matched),
            "missing_skills": sorted(job_skills - resume_skills),
            "breakdown": breakdown,
        }

    def _skill_overlap_score(self, resume_skills: list[str], job_keywords: list[str]) -> float:
        have = self._normalize_set(resume_skills)
        wanted = self._normalize_set(job_keywords)
        if not have or not wanted:
            return 0.0
        shared = len(have & wanted)
        return min(1.0, 0.8 * shared / len(wanted) + 0.2 * shared / len(have))

    def _keyword_similarity_score(self, resume_text: str, job_text: str) -> float:
        resume_tokens = self._tokens(resume_text)
        job_tokens = self._tokens(job_text)
        if not resume_tokens or not job_tokens:
            return 0.0

        job_vocab = set(job_tokens)
        overlap = len(set(resume_tokens) & job_vocab) / len(job_vocab)
        cosine = _cosine(Counter(resume_tokens), Counter(job_tokens))
        return min(1.0, overlap * 0.65 + cosine * 0.35)

    def _experience_level_match(self, work: list[WorkItem], job_title: str) -> float:
        years = self._estimate_years(work)
        title = (job_title or "").lower()

        if any(marker in title for marker in JUNIOR_MARKERS):
            return 1.0 if years <= 3 else 0.65
        if any(marker in title for marker in SENIOR_MARKERS):
            if years >= 6:
                return 1.0
            return 0.8 if years >= 4 else 0.45
        if years >= 3:
            return 1.0
        return 0.75 if years >= 1 else 0.55

    def _location_match(self, resume: ResumeDocument, job_location: str) -> float:
        if not job_location:
            return 0.8
        wanted = job_location.lower()
        if any(marker in wanted for marker in REMOTE_MARKERS):
            return 1.0

        home = resume.basics.location
        if home is None:
            return 0.65
        if home.city and home.city.strip().lower() in wanted:
            return 1.0
        if home.region and home.region.strip().lower() in wanted:
            return 0.85
        return 0.65

    def _extract_job_skills(self, job_data: dict[str, Any]) -> set[str]:
        skills = self._normalize_set(job_data.get("keywords") or [])
        body = f"{job_data.get('title', '')} {job_data.get('description', '')}"
        for pattern in JOB_SKILL_PATTERNS:
            skills.update(self._normalize_token(found) for found in pattern.findall(body))
        skills.discard("")
        return skills

    def _tokens(self, text: str) -> list[str]:
        tokens = (self._normalize_token(raw.strip(".")) for raw in TOKEN_PATTERN.findall((text or "").lower()))
        return [token for token in tokens if token and token not in STOP_WORDS]

    def _normalize_set(self, values: list[str]) -> set[str]:
        normalized = {self._normalize_token(value) for value in values}
        normalized.discard("")
        return normalized

    def _normalize_token(self, value: str) -> str:
        token = re.sub(r"\s+", " ", value.strip().lower())
        return SKILL_ALIASES.get(token, token)

    def _estimate_years(self, work: list[WorkItem]) -> float:
        """Sum of calendar years spanned by each position; ~1.8 per entry when no dates are given."""
        years = sum(_span_years(item.startDate, item.endDate) for item in work)
        return years if years > 0 else len(work) * 1.8


def _span_years(start: str | None, end: str | None) -> float:
    start_year = _year(start)
    if start_year is None:
        return 0.0
    end_year = _year(end) or datetime.now(timezone.utc).year
    return float(end_year - start_year + 1) if end_year >= start_year else 0.0


def _year(value: str | None) -> int | None:
    match = re.match(r"\s*((?:19|20)\d{2})", value or "")
    return int(match.group(1)) if match else None


def _cosine(a: Counter, b: Counter) -> float:
    dot = sum(count * b[token] for token, count in a.items())
    norm = math.sqrt(sum(v * v for v in a.values())) * math.sqrt(sum(v * v for v in b.values()))
    return dot / norm if norm else 0.0
