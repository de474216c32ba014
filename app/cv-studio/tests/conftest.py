import copy
import json

import pytest

from cv_studio.llm import flows
from cv_studio.llm.providers import LLMProvider

SAMPLE_CV = {
    "personalInfo": {
        "name": "Ada Lovelace",
        "contactInfo": {
            "email": "ada@lovelace.dev",
            "phone": "+44 20 7946 0000",
            "linkedin": "https://www.linkedin.com/in/ada",
        },
    },
    "profile": "Analytical engineer with a taste for engines.",
    "experience": [
        {
            "title": "Analyst",
            "company": "Analytical Engine Co",
            "dates": "1842 - 1843",
            "description": "- Wrote the first published algorithm\n- Annotated the Menabrea paper",
        }
    ],
    "education": [{"institution": "Home tutoring", "degree": "Mathematics", "dates": "1828 - 1835"}],
    "skills": ["Mathematics", "Algorithms"],
    "languages": [{"language": "English", "proficiency": "Native"}],
    "detectedLanguage": "en",
}

SAMPLE_PARSED = {
    "personalInfo": {"name": "Ada Lovelace", "contactInfo": {"email": "ada@lovelace.dev", "phone": "1"}},
    "profile": "Analytical engineer.",
    "experience": [
        {"title": "Analyst", "company": "Analytical Engine Co", "dates": "1842", "description": "Notes\nAlgorithm"}
    ],
    "education": [],
    "skills": ["Mathematics"],
    "languages": [],
    "detectedLanguage": "en",
}

SAMPLE_ANALYSIS = {
    "matchScore": 72,
    "matchingKeywords": ["algorithms"],
    "missingKeywords": ["Python"],
    "strengths": ["Strong mathematical background"],
    "areasForImprovement": ["Mention programming languages"],
    "summary": "Good fit with gaps in tooling.",
}


class FakeProvider(LLMProvider):
    """Provider double: returns canned responses and records every call."""

    name = "Fake"

    def __init__(self, responses=None, error=None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []

    def generate(self, system_prompt, user_prompt, output_schema, document=None):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "output_schema": output_schema,
                "document": document,
            }
        )
        if self.error:
            raise self.error
        response = self.responses.pop(0)
        return response if isinstance(response, str) else json.dumps(response)


@pytest.fixture
def fake_llm(monkeypatch):
    """Install a FakeProvider in place of the real provider factory."""

    def install(*responses, error=None):
        provider = FakeProvider(responses, error=error)
        monkeypatch.setattr(flows, "get_llm_provider", lambda config=None: provider)
        return provider

    return install


@pytest.fixture
def provider_factory_calls(monkeypatch):
    """Record provider creations without ever returning a usable provider."""
    calls = []

    def factory(config=None):
        calls.append(config)
        raise AssertionError("provider should not have been created")

    monkeypatch.setattr(flows, "get_llm_provider", factory)
    return calls


@pytest.fixture
def cv_payload():
    return copy.deepcopy(SAMPLE_CV)


@pytest.fixture
def cv_context():
    return {
        "profile": SAMPLE_CV["profile"],
        "experience": [
            {"title": exp["title"], "company": exp["company"], "description": exp["description"]}
            for exp in SAMPLE_CV["experience"]
        ],
        "skills": list(SAMPLE_CV["skills"]),
        "detectedLanguage": "en",
    }


@pytest.fixture
def parsed_payload():
    return copy.deepcopy(SAMPLE_PARSED)


@pytest.fixture
def analysis_payload():
    return dict(SAMPLE_ANALYSIS)
