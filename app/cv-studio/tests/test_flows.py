import asyncio

import pytest

from cv_studio.errors import InvalidResponseError, TransportFailure, ValidationError
from cv_studio.llm import (
    GENERATE_DETAIL,
    analyze_job_match,
    enhance_experience,
    generate_professional_detail,
    invoke,
    parse_cv,
)

PDF_URI = "data:application/pdf;base64,JVBERi0xLjQ="


def _detail_request(cv_context, **overrides):
    return {"sectionType": "deiAndCulturalFitStatement", "cvContext": cv_context, **overrides}


def test_generate_detail_recovers_bare_string(fake_llm, cv_context):
    provider = fake_llm("some bare string")

    result = asyncio.run(generate_professional_detail(_detail_request(cv_context)))

    assert result.to_wire() == {"generatedText": "some bare string"}
    assert len(provider.calls) == 1


def test_generate_detail_empty_object_fails(fake_llm, cv_context):
    fake_llm("{}")

    with pytest.raises(InvalidResponseError):
        asyncio.run(generate_professional_detail(_detail_request(cv_context)))


def test_explicit_language_reaches_the_provider(fake_llm, cv_context):
    provider = fake_llm({"generatedText": "Texte."})

    asyncio.run(generate_professional_detail(_detail_request(cv_context, language="fr")))

    system_prompt = provider.calls[0]["system_prompt"]
    assert "Write the entire output in French (fr)" in system_prompt


def test_output_schema_uses_wire_names(fake_llm, cv_context):
    provider = fake_llm({"generatedText": "ok"})

    invoke(GENERATE_DETAIL, _detail_request(cv_context))

    schema = provider.calls[0]["output_schema"]
    assert "generatedText" in schema["properties"]
    assert schema["required"] == ["generatedText"]


def test_invalid_input_never_reaches_provider(provider_factory_calls):
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(enhance_experience({"jobTitle": "Dev", "originalDescription": []}))

    assert set(exc_info.value.paths) == {"company", "originalDescription"}
    assert provider_factory_calls == []


def test_provider_error_becomes_transport_failure(fake_llm, cv_context):
    fake_llm(error=ConnectionError("upstream timed out"))

    with pytest.raises(TransportFailure) as exc_info:
        asyncio.run(generate_professional_detail(_detail_request(cv_context)))

    assert str(exc_info.value) == "upstream timed out"


def test_provider_creation_error_becomes_transport_failure(monkeypatch, cv_context):
    from cv_studio.llm import flows

    def broken_factory(config=None):
        raise ValueError("LLM_API_KEY is required for OpenAI")

    monkeypatch.setattr(flows, "get_llm_provider", broken_factory)

    with pytest.raises(TransportFailure, match="LLM_API_KEY is required"):
        asyncio.run(generate_professional_detail(_detail_request(cv_context)))


def test_enhance_returns_non_empty_bullets(fake_llm):
    fake_llm({"enhancedDescription": ["Led a team of 5 engineers", "Reduced costs by 10%"]})

    result = asyncio.run(
        enhance_experience(
            {"jobTitle": "Lead", "company": "Acme", "originalDescription": ["Led team", "Cut costs"]}
        )
    )

    assert result.enhanced_description
    assert all(isinstance(bullet, str) for bullet in result.enhanced_description)


def test_analyze_score_in_range(fake_llm, cv_context, analysis_payload):
    fake_llm(analysis_payload)

    result = asyncio.run(analyze_job_match({"cvData": cv_context, "jobDescription": "Senior analyst"}))

    assert isinstance(result.match_score, int)
    assert 0 <= result.match_score <= 100
    assert result.to_wire()["areasForImprovement"] == ["Mention programming languages"]


def test_analyze_rejects_out_of_range_score(fake_llm, cv_context, analysis_payload):
    analysis_payload["matchScore"] = 140
    fake_llm(analysis_payload)

    with pytest.raises(InvalidResponseError):
        asyncio.run(analyze_job_match({"cvData": cv_context, "jobDescription": "Senior analyst"}))


def test_parse_sends_document(fake_llm, parsed_payload):
    provider = fake_llm(parsed_payload)

    result = asyncio.run(parse_cv({"pdfDataUri": PDF_URI, "fileName": "ada.pdf"}))

    assert provider.calls[0]["document"] == PDF_URI
    assert result.personal_info.name == "Ada Lovelace"
    assert result.detected_language == "en"
