"""HTML rendering of a CV under the available visual templates."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlsplit

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..errors import UnknownTemplateError
from ..llm.prompt_builder import split_bullets
from ..schemas import CVData
from .translations import get_translations

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def web_url(value: str | None) -> str | None:
    """Return ``value`` when it is an http(s) URL usable as a link target, else None."""
    if value and urlsplit(value.strip()).scheme.lower() in ("http", "https"):
        return value.strip()
    return None


env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
env.filters["bullets"] = split_bullets
env.filters["web_url"] = web_url

DEFAULT_HEADINGS = {
    "profile": "profileSummary",
    "experience": "workExperience",
    "education": "education",
    "skills": "skills",
    "languages": "languages",
    "details": "professionalDetails",
}


@dataclass(frozen=True)
class TemplateStyle:
    """Everything that distinguishes one template from another."""

    id: str
    name: str
    theme: str
    sections: tuple[str, ...] = ("profile", "experience", "education", "skills", "languages", "details")
    headings: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HEADINGS))
    photo: str = "top"  # top, right, none
    anonymized: bool = False
    skills_as_chips: bool = False
    company_on_own_line: bool = False


TEMPLATES: dict[str, TemplateStyle] = {
    style.id: style
    for style in (
        TemplateStyle(id="classic", name="Classic", theme="classic"),
        TemplateStyle(id="photoRight", name="Photo Right", theme="classic", photo="right"),
        TemplateStyle(id="anonymized", name="Anonymized", theme="classic", photo="none", anonymized=True),
        TemplateStyle(
            id="marketing",
            name="Marketing",
            theme="marketing",
            sections=("profile", "experience", "skills", "education", "languages", "details"),
            headings={
                **DEFAULT_HEADINGS,
                "profile": "keyAchievementsProfile",
                "experience": "professionalJourney",
                "skills": "skillsSnapshot",
                "education": "educationCredentials",
            },
            skills_as_chips=True,
            company_on_own_line=True,
        ),
        TemplateStyle(id="finance", name="Finance", theme="finance"),
    )
}


def get_template_style(template_id: str) -> TemplateStyle:
    try:
        return TEMPLATES[template_id]
    except KeyError:
        raise UnknownTemplateError(template_id) from None


def render_cv_html(cv: CVData, template_id: str = "classic") -> str:
    """Render ``cv`` as a standalone HTML page using ``template_id``."""
    style = get_template_style(template_id)
    t = get_translations(cv.detected_language)
    logger.debug(f"Rendering CV with template {style.id} ({cv.detected_language or 'en'})")
    return env.get_template("cv.html").render(cv=cv, style=style, t=t, lang=(cv.detected_language or "en"))
