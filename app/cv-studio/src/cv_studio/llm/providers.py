"""LLM providers for schema-constrained generation.

A provider takes a system prompt, a user prompt, the JSON schema of the expected
answer and optionally a PDF (as a data URI) and returns the raw response text.
Decoding that text is the caller's job (see ``response.py``).
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..config import settings
from ..extractors import extract_text_from_pdf, parse_data_uri

logger = logging.getLogger(__name__)


def schema_instruction(output_schema: dict) -> str:
    """Restate the expected JSON schema for providers without a native schema mode."""
    return (
        "\n\nReturn ONLY valid JSON matching this JSON schema, with no markdown fences or commentary:\n"
        f"{json.dumps(output_schema, ensure_ascii=False)}"
    )


@dataclass
class LLMConfig:
    """Per-request LLM settings; any field left empty falls back to the environment."""

    endpoint: str | None = None
    model: str | None = None
    api_key: str | None = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    name = "llm"
    default_endpoint = ""
    requires_key = False

    def __init__(self, config: LLMConfig | None = None):
        config = config or LLMConfig()
        self._api_key = config.api_key or settings.LLM_API_KEY
        self._endpoint = config.endpoint or settings.LLM_ENDPOINT or self.default_endpoint
        self._model = config.model or settings.LLM_MODEL
        if self.requires_key and not self._api_key:
            raise ValueError(f"LLM_API_KEY is required for {self.name}")

    @abstractmethod
    def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        output_schema: dict,
        document: str | None = None,
    ) -> str:
        """Send prompts to the LLM and return the raw response text.

        Args:
            system_prompt: System prompt for the LLM.
            user_prompt: User prompt for the LLM.
            output_schema: JSON schema the response should follow.
            document: Optional data URI of a document (PDF) to attach.

        Returns:
            Raw response text, expected to be JSON conforming to output_schema.
        """

    def _log_call(self, system_prompt: str, user_prompt: str, document: str | None) -> None:
        logger.info(f"=== LLM CALL ({self.name}) ===")
        logger.info(f"Endpoint: {self._endpoint}")
        logger.info(f"Model: {self._model}")
        logger.info(f"System prompt ({len(system_prompt)} chars): {system_prompt[:300]}...")
        logger.info(f"User prompt ({len(user_prompt)} chars): {user_prompt[:300]}...")
        if document:
            logger.info(f"Attached document: {len(document)} chars (data URI)")


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions with a JSON-schema response format.

    Also used for any OpenAI-compatible server reached through a custom endpoint.
    """

    name = "OpenAI"
    default_endpoint = "https://api.openai.com/v1"
    requires_key = True

    def __init__(self, config: LLMConfig | None = None):
        super().__init__(config)
        from openai import OpenAI

        self.client = OpenAI(api_key=self._api_key, base_url=self._endpoint)

    def generate(self, system_prompt, user_prompt, output_schema, document=None):
        self._log_call(system_prompt, user_prompt, document)

        content: str | list = user_prompt
        if document:
            content = [
                {"type": "file", "file": {"filename": "cv.pdf", "file_data": document}},
                {"type": "text", "text": user_prompt},
            ]

        response = self.client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": content},
            ],
            response_format={
                "type": "json_schema",
                "json_schema": {"name": output_schema.get("title", "response"), "schema": output_schema},
            },
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
        )
        return response.choices[0].message.content


class CompatibleProvider(OpenAIProvider):
    """Self-hosted or proxied OpenAI-compatible server; the key is optional."""

    name = "OpenAI-compatible"
    default_endpoint = ""
    requires_key = False

    def __init__(self, config: LLMConfig | None = None):
        config = config or LLMConfig()
        if not (config.endpoint or settings.LLM_ENDPOINT):
            raise ValueError("LLM_ENDPOINT is required for openai_compatible")
        if not (config.api_key or settings.LLM_API_KEY):
            config = LLMConfig(endpoint=config.endpoint, model=config.model, api_key="not-needed")
        super().__init__(config)


class AnthropicProvider(LLMProvider):
    """Anthropic Messages API; the PDF goes in as a base64 document block."""

    name = "Anthropic"
    default_endpoint = "https://api.anthropic.com"
    requires_key = True

    def __init__(self, config: LLMConfig | None = None):
        super().__init__(config)
        from anthropic import Anthropic

        self.client = Anthropic(api_key=self._api_key, base_url=self._endpoint)

    def generate(self, system_prompt, user_prompt, output_schema, document=None):
        self._log_call(system_prompt, user_prompt, document)

        content: list[dict] = []
        if document:
            payload = parse_data_uri(document)
            content.append(
                {
                    "type": "document",
                    "source": {"type": "base64", "media_type": payload.mime_type, "data": payload.data},
                }
            )
        content.append({"type": "text", "text": user_prompt})

        response = self.client.messages.create(
            model=self._model,
            max_tokens=settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE,
            system=system_prompt + schema_instruction(output_schema),
            messages=[{"role": "user", "content": content}],
        )
        return response.content[0].text


class OllamaProvider(LLMProvider):
    """Local Ollama server through its OpenAI-compatible API."""

    name = "Ollama"
    default_endpoint = "http://localhost:11434/v1"

    def __init__(self, config: LLMConfig | None = None):
        super().__init__(config)
        from openai import OpenAI

        self.client = OpenAI(api_key="ollama", base_url=self._endpoint)  # key is ignored by Ollama

    def generate(self, system_prompt, user_prompt, output_schema, document=None):
        self._log_call(system_prompt, user_prompt, document)

        # Local models cannot read PDF attachments: inline the extracted text instead
        if document:
            cv_text = extract_text_from_pdf(parse_data_uri(document).to_bytes())
            user_prompt = f"{user_prompt}\n\n---\n{cv_text}\n---"

        response = self.client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": system_prompt + schema_instruction(output_schema)},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
            temperature=settings.LLM_TEMPERATURE,
        )
        return response.choices[0].message.content


PROVIDERS: dict[str, type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "ollama": OllamaProvider,
    "openai_compatible": CompatibleProvider,
}


def get_llm_provider(config: LLMConfig | None = None) -> LLMProvider:
    """Factory function to create the appropriate LLM provider.

    Args:
        config: Optional LLM configuration that overrides environment settings.
                A config carrying its own endpoint always targets an
                OpenAI-compatible server, whatever ``LLM_TYPE`` says.

    Raises:
        ValueError: If LLM_TYPE is unknown or a required key/endpoint is missing.
    """
    llm_type = "openai_compatible" if config and config.endpoint else settings.LLM_TYPE.lower()
    try:
        provider_class = PROVIDERS[llm_type]
    except KeyError:
        raise ValueError(f"Unknown LLM_TYPE: {llm_type}") from None
    return provider_class(config)
