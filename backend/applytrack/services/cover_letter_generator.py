from __future__ import annotations

from typing import Any

from jinja2 import Environment, StrictUndefined

from applytrack.schemas.resume import ResumeDocument


_SIGNATURE = """
{{ candidate_name }}{% for line in contact_lines %}
{{ line }}{% endfor %}"""

TEMPLATE_SOURCES = {
    "professional": """
Dear Hiring Manager,

I would like to be considered for the {{ job_title }} position at {{ company_name }}.
I have spent {{ years_experience }} years in {{ primary_skill_area }}, most recently as {{ last_job_title }}.

{% if custom_intro %}{{ custom_intro }}

{% endif %}{% if top_skills %}The skills I would bring to the team:
{% for skill in top_skills %}- {{ skill }}
{% endfor %}
{% endif %}{% if highlight %}One result I am proud of: {{ highlight }}

{% endif %}Your posting mentions {{ key_job_requirement }}. My work as {{ relevant_experience }} has prepared me for exactly that.

Thank you for your time and consideration.

Best regards,
""" + _SIGNATURE,
    "enthusiastic": """
Dear {{ company_name }} Team,

The {{ job_title }} opening caught my attention right away. Building things in {{ primary_skill_area }} is what I enjoy most, and I would love to do it with you.

{% if custom_intro %}{{ custom_intro }}

{% endif %}{% if top_skills %}What I am strongest at:
{% for skill in top_skills %}- {{ skill }}
{% endfor %}
{% endif %}{% if highlight %}Recently: {{ highlight }}

{% endif %}I would be glad to talk about how I can help {{ company_name }}.

Kind regards,
""" + _SIGNATURE,
    "concise": """
Dear Hiring Manager,

I am applying for the {{ job_title }} position at {{ company_name }}. I bring {{ years_experience }} years of experience{% if top_skills %} with {{ top_skills | join(", ") }}{% endif %}.
{% if custom_intro %}
{{ custom_intro }}
{% endif %}
Thank you for your consideration.

Best,
""" + _SIGNATURE,
}

DATA_SKILLS = {"python", "sql", "spark", "airflow", "dbt", "pandas"}
WEB_SKILLS = {"react", "javascript", "typescript", "html", "css", "node", "nodejs"}


class CoverLetterGenerator:
    """Renders a cover letter from a JSON resume and a stored job posting."""

    def __init__(self) -> None:
        env = Environment(undefined=StrictUndefined, keep_trailing_newline=False, autoescape=False)
        self.templates = {tone: env.from_string(source.strip()) for tone, source in TEMPLATE_SOURCES.items()}

    def tones(self) -> list[str]:
        return list(self.templates)

    def generate(
        self,
        resume: ResumeDocument,
        job_data: dict[str, Any],
        tone: str = "professional",
        custom_intro: str = "",
    ) -> str:
        template = self.templates.get(tone) or self.templates["professional"]
        return template.render(**self._context(resume, job_data, custom_intro))

    def _context(self, resume: ResumeDocument, job_data: dict[str, Any], custom_intro: str) -> dict[str, Any]:
        latest = next((item for item in resume.work if item.position), None)
        basics = resume.basics
        return {
            "job_title": job_data.get("title") or "the role",
            "company_name": job_data.get("company") or "the company",
            "years_experience": max(len(resume.work) * 2, 1),
            "primary_skill_area": self._primary_skill_area(resume),
            "top_skills": resume.skill_names()[:5],
            "last_job_title": latest.position if latest else "my recent role",
            "highlight": next((h for item in resume.work for h in item.highlights if h.strip()), ""),
            "key_job_requirement": self._key_requirement(job_data),
            "relevant_experience": latest.position if latest else "my technical background",
            "candidate_name": basics.name,
            "contact_lines": [value for value in (basics.email, basics.phone, basics.url) if value],
            "custom_intro": (custom_intro or "").strip(),
        }

    def _primary_skill_area(self, resume: ResumeDocument) -> str:
        skills = {name.lower() for name in resume.skill_names()}
        data_count = len(DATA_SKILLS & skills)
        web_count = len(WEB_SKILLS & skills)
        if data_count > web_count:
            return "data engineering"
        if web_count > data_count:
            return "web engineering"
        return "software engineering"

    def _key_requirement(self, job_data: dict[str, Any]) -> str:
        text = " ".join((job_data.get("description") or "").split())
        if not text:
            return "strong technical and collaboration skills"
        return text[:120]
