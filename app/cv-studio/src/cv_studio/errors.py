"""Error taxonomy shared by the invocation wrappers and the HTTP layer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldIssue:
    """One violated constraint: dotted field path plus a readable reason."""

    path: str
    message: str

    def to_dict(self) -> dict:
        return {"path": self.path, "message": self.message}


class CVStudioError(Exception):
    """Base class for errors surfaced to API callers."""


class ValidationError(CVStudioError):
    """Input did not match its schema. Carries every violated field."""

    def __init__(self, issues: list[FieldIssue]):
        self.issues = list(issues)
        summary = "; ".join(f"{issue.path}: {issue.message}" for issue in self.issues[:5])
        super().__init__(f"Validation failed: {summary}")

    @property
    def paths(self) -> list[str]:
        return [issue.path for issue in self.issues]


class InvalidResponseError(CVStudioError):
    """LLM output could not be coerced to the expected schema, even via fallback."""

    public_message = "AI response format error"


class TransportFailure(CVStudioError):
    """The call to the LLM collaborator did not complete."""


class UnknownTemplateError(CVStudioError, KeyError):
    """Requested presentation template does not exist."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Unknown template: {template_id}")

    def __str__(self) -> str:
        return f"Unknown template: {self.template_id}"
