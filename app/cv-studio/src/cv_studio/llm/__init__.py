"""LLM invocation modules."""

from .flows import (
    ANALYZE_JOB_MATCH,
    ENHANCE_EXPERIENCE,
    GENERATE_DETAIL,
    PARSE_CV,
    UseCase,
    analyze_job_match,
    enhance_experience,
    generate_professional_detail,
    invoke,
    parse_cv,
)
from .providers import LLMConfig, LLMProvider, get_llm_provider

__all__ = [
    "UseCase",
    "PARSE_CV",
    "ENHANCE_EXPERIENCE",
    "ANALYZE_JOB_MATCH",
    "GENERATE_DETAIL",
    "invoke",
    "parse_cv",
    "enhance_experience",
    "analyze_job_match",
    "generate_professional_detail",
    "LLMProvider",
    "LLMConfig",
    "get_llm_provider",
]
