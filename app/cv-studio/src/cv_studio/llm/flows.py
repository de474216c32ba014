"""One LLM round trip per CV use case: validate, prompt, call, decode."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from ..errors import TransportFailure
from ..schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    EnhanceRequest,
    EnhanceResponse,
    GenerateDetailRequest,
    GenerateDetailResponse,
    ParsedCV,
    ParseRequest,
)
from ..validation import validate
from .prompt_builder import (
    Prompt,
    build_analyze_prompt,
    build_enhance_prompt,
    build_generate_detail_prompt,
    build_parse_prompt,
)
from .providers import LLMConfig, get_llm_provider
from .response import decode_response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UseCase:
    """Static description of one LLM-backed operation."""

    name: str
    input_model: type[BaseModel]
    output_model: type[BaseModel]
    build_prompt: Callable[[Any], Prompt]
    primary_field: str | None = None  # field fallback decoding may fill

    def output_schema(self) -> dict:
        return self.output_model.model_json_schema(by_alias=True)


PARSE_CV = UseCase(
    name="parse_cv",
    input_model=ParseRequest,
    output_model=ParsedCV,
    build_prompt=build_parse_prompt,
)

ENHANCE_EXPERIENCE = UseCase(
    name="enhance_experience",
    input_model=EnhanceRequest,
    output_model=EnhanceResponse,
    build_prompt=build_enhance_prompt,
    primary_field="enhanced_description",
)

ANALYZE_JOB_MATCH = UseCase(
    name="analyze_job_match",
    input_model=AnalyzeRequest,
    output_model=AnalyzeResponse,
    build_prompt=build_analyze_prompt,
)

GENERATE_DETAIL = UseCase(
    name="generate_professional_detail",
    input_model=GenerateDetailRequest,
    output_model=GenerateDetailResponse,
    build_prompt=build_generate_detail_prompt,
    primary_field="generated_text",
)


def invoke(use_case: UseCase, payload: Any, llm_config: LLMConfig | None = None) -> BaseModel:
    """
    Run one request/response round trip for ``use_case``.

    Args:
        use_case: The operation to run.
        payload: Request as a dict (camelCase or snake_case keys) or model instance.
        llm_config: Optional LLM configuration that overrides environment settings.

    Returns:
        The validated response model.

    Raises:
        ValidationError: If the payload does not match the input schema (no call is made).
        TransportFailure: If the LLM call does not complete.
        InvalidResponseError: If the response cannot be decoded, even via fallback.
    """
    request = validate(use_case.input_model, payload)
    prompt = use_case.build_prompt(request)

    try:
        provider = get_llm_provider(llm_config)
        logger.info(f"Running {use_case.name} with {type(provider).__name__}")
        raw = provider.generate(
            prompt.system,
            prompt.user,
            use_case.output_schema(),
            document=prompt.document,
        )
    except Exception as e:
        logger.error(f"{use_case.name} LLM call failed: {e}")
        raise TransportFailure(str(e)) from e

    logger.debug(f"{use_case.name} LLM response: {str(raw)[:500]}...")
    return decode_response(raw, use_case.output_model, use_case.primary_field)


async def _invoke_async(use_case: UseCase, payload: Any, llm_config: LLMConfig | None) -> BaseModel:
    # Provider SDK clients are synchronous; keep the event loop free during the call
    return await asyncio.to_thread(invoke, use_case, payload, llm_config)


async def parse_cv(payload: Any, llm_config: LLMConfig | None = None) -> ParsedCV:
    """Extract a structured CV from a PDF data URI."""
    return await _invoke_async(PARSE_CV, payload, llm_config)


async def enhance_experience(payload: Any, llm_config: LLMConfig | None = None) -> EnhanceResponse:
    """Rewrite experience bullet points to be clearer and more impactful."""
    return await _invoke_async(ENHANCE_EXPERIENCE, payload, llm_config)


async def analyze_job_match(payload: Any, llm_config: LLMConfig | None = None) -> AnalyzeResponse:
    """Score a CV subset against a job description."""
    return await _invoke_async(ANALYZE_JOB_MATCH, payload, llm_config)


async def generate_professional_detail(
    payload: Any, llm_config: LLMConfig | None = None
) -> GenerateDetailResponse:
    """Draft one professional-detail paragraph grounded in the CV context."""
    return await _invoke_async(GENERATE_DETAIL, payload, llm_config)
