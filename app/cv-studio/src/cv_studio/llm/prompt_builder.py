"""Prompt construction for the four CV use cases.

Every builder is a pure function of a validated request and returns the
system/user prompt pair sent to the LLM. Output-language precedence is always
spelled out in the prompt text.
"""

import re
from dataclasses import dataclass

from ..config import settings
from ..prompts import load_prompt
from ..schemas import (
    AnalyzeRequest,
    CVContext,
    EnhanceRequest,
    ExperienceContext,
    GenerateDetailRequest,
    ParseRequest,
    Proficiency,
    SectionType,
)

LANGUAGE_NAMES = {
    "en": "English",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
    "it": "Italian",
    "nl": "Dutch",
    "pt": "Portuguese",
}

SECTION_INSTRUCTIONS = {
    SectionType.ANALYTICS_REPORTING_SUMMARY: (
        "an insightful summary of their experience with analytics and reporting in executive search or "
        "related fields. Focus on quantifiable achievements or specific examples from the context."
    ),
    SectionType.DEI_AND_CULTURAL_FIT_STATEMENT: (
        "a thoughtful statement on their approach to Diversity, Equity, and Inclusion (DEI) and to assessing "
        "cultural fit. It should be positive and reflect an understanding of modern best practices."
    ),
    SectionType.SEARCH_COMPLETION_METRICS_SUMMARY: (
        "a concise summary of key metrics related to search completion, time-to-hire, candidate quality, or "
        "other relevant performance indicators in recruitment or executive search. Derive it from the "
        "experience described when direct metrics are not stated."
    ),
}

_BULLET_PREFIX = re.compile(r"^(?:[-*•–]\s*)")


@dataclass(frozen=True)
class Prompt:
    """A rendered prompt, plus the document attached to it if any."""

    system: str
    user: str
    document: str | None = None  # data URI


def split_bullets(description: str) -> list[str]:
    """Newline-delimited bullet text -> bullet list (blank lines and leading markers dropped)."""
    bullets = []
    for line in (description or "").split("\n"):
        line = _BULLET_PREFIX.sub("", line.strip()).strip()
        if line:
            bullets.append(line)
    return bullets


def join_bullets(bullets: list[str]) -> str:
    """Bullet list -> newline-delimited description."""
    return "\n".join(bullet.strip() for bullet in bullets if bullet and bullet.strip())


def language_label(code: str) -> str:
    """Human-readable label for a language code, e.g. 'fr' -> 'French (fr)'."""
    normalized = code.strip()
    name = LANGUAGE_NAMES.get(normalized.lower()[:2]) if len(normalized) <= 5 else None
    return f"{name} ({normalized})" if name else normalized


def resolve_language(explicit: str | None, detected: str | None, default: str | None = None) -> str:
    """Pick the output language: explicit request > CV's detected language > default (English)."""
    for candidate in (explicit, detected):
        if candidate and candidate.strip():
            return candidate.strip()
    return default or settings.DEFAULT_LANGUAGE


def language_instruction(explicit: str | None, detected: str | None) -> str:
    """State the resolved output language and the rule that selected it."""
    target = language_label(resolve_language(explicit, detected))
    if explicit and explicit.strip():
        reason = "because it was explicitly requested"
    elif detected and detected.strip():
        reason = "because it is the CV's detected language and no other language was requested"
    else:
        reason = "because no language was requested and the CV's language is unknown"
    return (
        f"Write the entire output in {target}, {reason}. "
        "Language precedence: an explicitly requested language comes first, then the CV's detected "
        "language, then English."
    )


def format_experiences(experiences: list[ExperienceContext]) -> str:
    """Format experiences list for the prompt."""
    if not experiences:
        return "(no experience provided)"

    lines = []
    for exp in experiences:
        lines.append(f"- Title: {exp.title} at {exp.company}")
        lines.append(f"  Description: {exp.description}")
    return "\n".join(lines)


def format_skills(skills: list[str]) -> str:
    """Format skills list for the prompt."""
    if not skills:
        return "(no skills provided)"
    return ", ".join(skills)


def build_parse_prompt(request: ParseRequest) -> Prompt:
    system = load_prompt("parse_cv").format(
        proficiency_levels="/".join(level.value for level in Proficiency),
    )
    file_hint = f" ({request.file_name})" if request.file_name else ""
    user = load_prompt("parse_cv_user").format(file_hint=file_hint)
    return Prompt(system=system, user=user, document=request.pdf_data_uri)


def build_enhance_prompt(request: EnhanceRequest) -> Prompt:
    if request.language and request.language.strip():
        target = language_label(request.language)
        instruction = (
            f"You will rewrite the following bullet points in {target} to be more clear and impactful, "
            f"incorporating the job title and company. Write in {target} because it was explicitly "
            "requested, even if the original bullet points use another language."
        )
    else:
        instruction = (
            "You will rewrite the following bullet points in their original language to be more clear and "
            "impactful, incorporating the job title and company. No output language was requested, so keep "
            "the language of the original bullet points and do not translate them."
        )

    system = load_prompt("enhance_experience").format(language_instruction=instruction)
    user = load_prompt("enhance_experience_user").format(
        job_title=request.job_title,
        company=request.company,
        bullets="\n".join(f" - {bullet}" for bullet in request.original_description),
    )
    return Prompt(system=system, user=user)


def build_analyze_prompt(request: AnalyzeRequest) -> Prompt:
    cv: CVContext = request.cv_data
    system = load_prompt("analyze_job_match").format(
        language_instruction=language_instruction(request.language, cv.detected_language),
        cv_language=language_label(cv.detected_language) if cv.detected_language else "unknown",
    )
    user = load_prompt("analyze_job_match_user").format(
        profile=cv.profile,
        experiences=format_experiences(cv.experience),
        skills=format_skills(cv.skills),
        job_description=request.job_description,
    )
    return Prompt(system=system, user=user)


def build_generate_detail_prompt(request: GenerateDetailRequest) -> Prompt:
    cv: CVContext = request.cv_context
    system = load_prompt("generate_detail").format(
        instruction=SECTION_INSTRUCTIONS[request.section_type],
        language_instruction=language_instruction(request.language, cv.detected_language),
    )
    current_text = ""
    if request.current_text and request.current_text.strip():
        current_text = f"\nCurrent text in the section (for reference or refinement):\n{request.current_text}\n"
    user = load_prompt("generate_detail_user").format(
        profile=cv.profile,
        experiences=format_experiences(cv.experience),
        skills=format_skills(cv.skills),
        current_text=current_text,
        section_type=request.section_type.value,
    )
    return Prompt(system=system, user=user)
