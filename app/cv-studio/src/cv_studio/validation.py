"""Schema validation with a flat, path-addressed issue list."""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import FieldIssue, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

ROOT_PATH = "$"

# Readable replacements for pydantic's default wording
_MESSAGES = {
    "missing": "Field is required",
    "string_too_short": "Must not be empty",
    "value_error": "Invalid value",
    "url_parsing": "Invalid URL",
    "url_scheme": "Invalid URL",
}


def _format_path(loc: tuple) -> str:
    # Union members add their type name to loc; keep only real field keys and indexes
    parts = [str(part) for part in loc if isinstance(part, int) or not _is_type_tag(part)]
    return ".".join(parts) if parts else ROOT_PATH


def _is_type_tag(part: Any) -> bool:
    text = str(part)
    return text in {"str", "int", "float", "bool", "none", "url", "literal['']"} or "[" in text or text.startswith(
        "function-"
    )


def _format_message(error: dict) -> str:
    kind = error.get("type", "")
    if kind == "too_short":
        min_length = (error.get("ctx") or {}).get("min_length", 1)
        return f"At least {min_length} item(s) required"
    if kind == "value_error" and "email" in error.get("msg", "").lower():
        return "Invalid email address"
    return _MESSAGES.get(kind, error.get("msg", "Invalid value"))


def issues_from_errors(errors: list[dict], location: str | None = None) -> list[FieldIssue]:
    """Flatten pydantic error dicts into issues, first one per path.

    ``location`` drops a leading loc segment such as FastAPI's ``"body"``.
    """
    issues = []
    seen = set()
    for error in errors:
        loc = tuple(error.get("loc", ()))
        if location and loc[:1] == (location,):
            loc = loc[1:]
        issue = FieldIssue(path=_format_path(loc), message=_format_message(error))
        # Unions report once per member; the first one per path is the most specific
        if issue.path not in seen:
            seen.add(issue.path)
            issues.append(issue)
    return issues


def collect_issues(schema: type[BaseModel], value: Any) -> list[FieldIssue]:
    """Return every constraint ``value`` violates; empty when it conforms.

    Never raises for a pydantic model schema.
    """
    if isinstance(value, schema):
        return []
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True)

    try:
        schema.model_validate(value)
    except PydanticValidationError as e:
        return issues_from_errors(e.errors())
    return []


def validate(schema: type[ModelT], value: Any) -> ModelT:
    """Coerce ``value`` into ``schema`` or raise ValidationError listing every violation."""
    if isinstance(value, schema):
        return value
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True)

    try:
        return schema.model_validate(value)
    except PydanticValidationError:
        issues = collect_issues(schema, value)
        logger.info(f"{schema.__name__} validation failed on {len(issues)} field(s): {[i.path for i in issues]}")
        raise ValidationError(issues) from None
