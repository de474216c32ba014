"""Pydantic schemas for the CV record and the LLM request/response contracts."""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """Dump with camelCase keys, JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)


# --- CV record ---


class Proficiency(str, Enum):
    """Suggested proficiency levels. The CV field itself accepts free text."""

    NATIVE = "Native"
    FLUENT = "Fluent"
    CONVERSATIONAL = "Conversational"
    BASIC = "Basic"


class ContactInfo(CamelModel):
    email: str = Field(..., description="The email address of the person.")
    phone: str = Field(..., description="The phone number of the person.")
    linkedin: str | None = Field(default=None, description="The LinkedIn profile URL, if available.")


class PersonalInfo(CamelModel):
    name: str = Field(..., description="The full name of the person.")
    contact_info: ContactInfo = Field(..., description="Contact information of the person.")


class Experience(CamelModel):
    title: str = Field(..., description="The job title.")
    company: str = Field(..., description="The name of the company.")
    dates: str = Field(..., description="The start and end dates of the employment.")
    description: str = Field(
        ..., description="Responsibilities and achievements in the role, one bullet point per line."
    )


class Education(CamelModel):
    institution: str = Field(..., description="The name of the educational institution.")
    degree: str = Field(..., description="The degree obtained.")
    dates: str = Field(..., description="The start and end dates of the education.")
    description: str | None = Field(default=None, description="A description of the studies and achievements.")


class LanguageSkill(CamelModel):
    language: str = Field(..., description="The name of the language.")
    proficiency: str = Field(
        ..., description="The proficiency level (Native, Fluent, Conversational, Basic, or as written)."
    )


class TitledItem(CamelModel):
    title: str
    description: str = ""


class KeyMetric(CamelModel):
    metric: str
    value: str | int | float
    visual: Literal["progress", "text"] | None = None


class Testimonial(CamelModel):
    quote: str
    author: str


class AutomatedProcess(CamelModel):
    title: str
    description: str = ""
    tools_used: list[str] = []


class ParsedCV(CamelModel):
    """The structure extracted from an uploaded CV by the parse step."""

    personal_info: PersonalInfo = Field(..., description="Personal information extracted from the CV.")
    profile: str = Field(..., description="A brief professional profile or summary.")
    experience: list[Experience] = Field(..., description="Work experience details.")
    education: list[Education] = Field(..., description="Education details.")
    skills: list[str] = Field(..., description="A list of skills.")
    languages: list[LanguageSkill] = Field(..., description="Languages spoken and proficiency levels.")
    detected_language: str | None = Field(
        default=None, description='Two-letter code of the language the CV is written in ("en" or "fr").'
    )


class CVData(ParsedCV):
    """Canonical résumé record held per session."""

    photo: str | None = None  # data URI
    file_name: str | None = None
    detected_language: str | None = "en"

    # Professional detail sections
    tools_proficiency: list[str] = []
    analytics_reporting_summary: str = ""
    dei_and_cultural_fit_statement: str = ""
    search_completion_metrics_summary: str = ""

    # Extended fields feeding specialised templates
    tech_stack: list[str] = []
    advisory_projects: list[TitledItem] = []
    board_experience: str = ""
    geographic_reach: list[str] = []
    tech_stacks_hired_for: list[str] = []
    industry_focus: list[str] = []
    research_methodologies: list[str] = []
    mapping_tools: list[str] = []
    publications_projects: list[TitledItem] = []
    key_metrics: list[KeyMetric] = []
    testimonials: list[Testimonial] = []
    client_brands: list[str] = []
    service_suite: list[str] = []
    typical_mandates: list[str] = []
    portfolio_impact: list[TitledItem] = []
    ai_tools_used: list[str] = []
    automated_processes_implemented: list[AutomatedProcess] = []

    @classmethod
    def empty(cls) -> "CVData":
        """An empty record, ready to be populated by a parse."""
        return cls(
            personal_info=PersonalInfo(name="", contact_info=ContactInfo(email="", phone="", linkedin="")),
            profile="",
            experience=[],
            education=[],
            skills=[],
            languages=[],
        )


# --- Edit form (complete CV) ---


class ContactInfoForm(CamelModel):
    email: EmailStr
    phone: str = Field(..., min_length=1)
    linkedin: HttpUrl | Literal[""] | None = None


class PersonalInfoForm(CamelModel):
    name: str = Field(..., min_length=1)
    contact_info: ContactInfoForm


class ExperienceForm(CamelModel):
    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    dates: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)


class EducationForm(CamelModel):
    institution: str = Field(..., min_length=1)
    degree: str = Field(..., min_length=1)
    dates: str = Field(..., min_length=1)
    description: str | None = None


class LanguageForm(CamelModel):
    language: str = Field(..., min_length=1)
    proficiency: str = Field(..., min_length=1)


class CVForm(CamelModel):
    """Constraints a CV must satisfy to be saved from the editor."""

    personal_info: PersonalInfoForm
    profile: str = Field(..., min_length=1)
    experience: list[ExperienceForm] = Field(..., min_length=1)
    education: list[EducationForm] = Field(..., min_length=1)
    skills: list[Annotated[str, Field(min_length=1)]] = Field(..., min_length=1)
    languages: list[LanguageForm] | None = None
    photo: str | None = None
    file_name: str | None = None
    detected_language: str | None = None


# --- Parse ---


class ParseRequest(CamelModel):
    pdf_data_uri: str = Field(
        ...,
        pattern=r"^data:[^;,]+;base64,\S",
        description="A CV PDF as a data URI: 'data:<mimetype>;base64,<encoded_data>'.",
    )
    file_name: str | None = None


# --- Enhance ---


class EnhanceRequest(CamelModel):
    job_title: str = Field(..., description="The job title of the experience.")
    company: str = Field(..., description="The company where the experience took place.")
    original_description: list[str] = Field(
        ..., min_length=1, description="The original bullet points describing the experience."
    )
    language: str | None = Field(
        default=None, description="Output language. When absent, the bullets keep their original language."
    )


class EnhanceResponse(CamelModel):
    enhanced_description: list[str] = Field(
        ..., min_length=1, description="The enhanced bullet points describing the experience."
    )


# --- Analyze / generate-detail shared context ---


class ExperienceContext(CamelModel):
    title: str
    company: str
    description: str = Field(..., description="Responsibilities and achievements for the role.")


class CVContext(CamelModel):
    """The subset of a CV sent to generative prompts."""

    profile: str = Field(..., description="The professional profile summary from the CV.")
    experience: list[ExperienceContext] = Field(..., description="Work experience from the CV.")
    skills: list[str] = Field(..., description="A list of skills from the CV.")
    detected_language: str | None = Field(default=None, description='Detected CV language ("en", "fr").')

    @classmethod
    def from_cv(cls, cv: CVData) -> "CVContext":
        return cls(
            profile=cv.profile,
            experience=[
                ExperienceContext(title=exp.title, company=exp.company, description=exp.description)
                for exp in cv.experience
            ],
            skills=list(cv.skills),
            detected_language=cv.detected_language,
        )


# --- Analyze ---


class AnalyzeRequest(CamelModel):
    cv_data: CVContext
    job_description: str = Field(..., min_length=1, description="The full text of the job description.")
    language: str | None = Field(default=None, description="Language for the analysis output.")


class AnalyzeResponse(CamelModel):
    match_score: int = Field(..., ge=0, le=100, description="How well the CV matches the job (0-100).")
    matching_keywords: list[str] = Field(..., description="Job description keywords present in the CV.")
    missing_keywords: list[str] = Field(..., description="Important job description keywords missing from the CV.")
    strengths: list[str] = Field(..., description="Aspects of the CV that strongly align with the job.")
    areas_for_improvement: list[str] = Field(
        ..., description="Specific suggestions to tailor the CV to the job description."
    )
    summary: str = Field(..., description="A brief overall summary of the match and key recommendations.")


# --- Generate professional detail ---


class SectionType(str, Enum):
    """Professional detail sections the LLM can draft."""

    ANALYTICS_REPORTING_SUMMARY = "analyticsReportingSummary"
    DEI_AND_CULTURAL_FIT_STATEMENT = "deiAndCulturalFitStatement"
    SEARCH_COMPLETION_METRICS_SUMMARY = "searchCompletionMetricsSummary"


class GenerateDetailRequest(CamelModel):
    section_type: SectionType
    cv_context: CVContext
    current_text: str | None = Field(default=None, description="Existing text to refine or build upon.")
    language: str | None = Field(default=None, description="Language for the generated output.")


class GenerateDetailResponse(CamelModel):
    generated_text: str = Field(..., min_length=1, description="The generated text for the section.")


# --- API envelopes ---


class LLMConfigRequest(BaseModel):
    """Optional LLM configuration overriding the service defaults."""

    llm_endpoint: str | None = None
    llm_model: str | None = None
    llm_api_key: str | None = None


class ParseRequestBody(ParseRequest):
    """``POST /cv/parse``: a parse request, optionally bound to a session."""

    session_id: str | None = None
    llm_config: LLMConfigRequest | None = None


class EnhanceRequestBody(EnhanceRequest):
    llm_config: LLMConfigRequest | None = None


class AnalyzeRequestBody(AnalyzeRequest):
    llm_config: LLMConfigRequest | None = None


class GenerateDetailRequestBody(GenerateDetailRequest):
    llm_config: LLMConfigRequest | None = None


class SessionActionRequest(CamelModel):
    """Options for an LLM operation run against a session's own record."""

    language: str | None = None
    llm_config: LLMConfigRequest | None = None


class SessionAnalyzeRequest(SessionActionRequest):
    job_description: str = Field(..., min_length=1, description="The full text of the job description.")


class SessionResponse(BaseModel):
    session_id: str
    cv_data: dict | None = None
    parsed_cv_data: dict | None = None
    is_loading: bool = False
    error: str | None = None


class TemplateInfo(BaseModel):
    id: str
    name: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
