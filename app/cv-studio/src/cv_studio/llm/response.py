"""Decode raw LLM output into the expected response model.

Strict decode first. Use cases that declare a primary field also accept, in
this order:

1. a bare string (plain text, possibly fenced, a JSON string, or an unquoted
   JSON number or boolean) as the primary field;
2. a single-key object, whatever the key, whose value becomes the primary field.

Anything else raises InvalidResponseError.
"""

import json
import logging
import re
import typing
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..errors import InvalidResponseError
from .prompt_builder import split_bullets

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_NOT_JSON = object()
_JSON_FINDER = re.compile(r"\{.*\}", re.S)


def _strip_fences(text: str) -> str:
    if text.startswith("```"):
        match = re.search(r"```[\w-]*\s*([\s\S]*?)```", text)
        if match:
            return match.group(1).strip()
        # Truncated block with no closing fence
        match = re.search(r"```[\w-]*\s*([\s\S]*)", text)
        if match:
            logger.warning("LLM response appears truncated (no closing ```)")
            return match.group(1).strip()
    return text


def load_json(raw: str) -> Any:
    """Parse JSON from an LLM response; returns a sentinel when there is none."""
    text = _strip_fences(raw.strip())
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    # Some models wrap the object in prose
    if match := _JSON_FINDER.search(text):
        try:
            return json.loads(match.group())
        except json.JSONDecodeError:
            pass
    return _NOT_JSON


def _is_list_field(model: type[BaseModel], field_name: str) -> bool:
    annotation = model.model_fields[field_name].annotation
    return typing.get_origin(annotation) is list


def _fallback_value(raw: str, data: Any) -> Any:
    if data is _NOT_JSON:
        return _strip_fences(raw.strip())
    if isinstance(data, str):
        return data.strip()
    if isinstance(data, (bool, int, float)):
        # A bare JSON scalar is text the model forgot to quote
        return json.dumps(data)
    if isinstance(data, dict) and len(data) == 1:
        return next(iter(data.values()))
    return None


def decode_response(raw: Any, output_model: type[ModelT], primary_field: str | None = None) -> ModelT:
    """
    Coerce a raw LLM response into ``output_model``.

    Args:
        raw: Response from the provider, normally text.
        output_model: Expected response schema.
        primary_field: Field name fallbacks may fill; None disables fallbacks.

    Raises:
        InvalidResponseError: If no usable value can be extracted.
    """
    if isinstance(raw, output_model):
        return raw
    if isinstance(raw, dict):
        raw = json.dumps(raw)
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidResponseError(f"Empty response from LLM for {output_model.__name__}")

    data = load_json(raw)
    if isinstance(data, dict):
        try:
            return output_model.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(f"{output_model.__name__} strict decode failed: {e.error_count()} error(s)")

    if primary_field is None:
        logger.error(f"Unusable LLM response for {output_model.__name__}: {raw[:200]}")
        raise InvalidResponseError(f"LLM response does not match {output_model.__name__}")

    value = _fallback_value(raw, data)
    if value is None or value == "":
        logger.error(f"No fallback shape matched for {output_model.__name__}: {raw[:200]}")
        raise InvalidResponseError(f"LLM response does not match {output_model.__name__}")

    if isinstance(value, str) and _is_list_field(output_model, primary_field):
        value = split_bullets(value)

    try:
        result = output_model.model_validate({primary_field: value})
    except PydanticValidationError as e:
        logger.error(f"Fallback value rejected for {output_model.__name__}.{primary_field}: {e}")
        raise InvalidResponseError(f"LLM response does not match {output_model.__name__}") from e

    logger.info(f"Recovered {output_model.__name__}.{primary_field} from a non-conforming response")
    return result
