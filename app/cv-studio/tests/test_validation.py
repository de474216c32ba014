import pytest

from cv_studio.errors import ValidationError
from cv_studio.schemas import CVForm, EnhanceRequest, ParseRequest
from cv_studio.validation import ROOT_PATH, collect_issues, issues_from_errors, validate


def test_empty_experience_is_rejected():
    value = {
        "experience": [],
        "education": [{"institution": "X", "degree": "Y", "dates": "2020-2021"}],
        "skills": ["Go"],
        "profile": "p",
        "personalInfo": {"name": "A", "contactInfo": {"email": "a@b.com", "phone": "1"}},
    }

    with pytest.raises(ValidationError) as exc_info:
        validate(CVForm, value)

    assert exc_info.value.paths == ["experience"]
    assert exc_info.value.issues[0].message == "At least 1 item(s) required"


def test_valid_form_has_no_issues(cv_payload):
    assert collect_issues(CVForm, cv_payload) == []
    form = validate(CVForm, cv_payload)
    assert form.personal_info.name == "Ada Lovelace"


def test_every_violation_is_reported(cv_payload):
    cv_payload["personalInfo"]["name"] = ""
    cv_payload["personalInfo"]["contactInfo"]["email"] = "not-an-email"
    cv_payload["experience"][0]["title"] = ""
    cv_payload["skills"] = ["Go", ""]
    del cv_payload["profile"]

    issues = {issue.path: issue.message for issue in collect_issues(CVForm, cv_payload)}

    assert issues["personalInfo.name"] == "Must not be empty"
    assert issues["personalInfo.contactInfo.email"] == "Invalid email address"
    assert issues["experience.0.title"] == "Must not be empty"
    assert issues["skills.1"] == "Must not be empty"
    assert issues["profile"] == "Field is required"


def test_linkedin_must_be_url_or_empty(cv_payload):
    cv_payload["personalInfo"]["contactInfo"]["linkedin"] = ""
    assert collect_issues(CVForm, cv_payload) == []

    cv_payload["personalInfo"]["contactInfo"]["linkedin"] = "not a url"
    paths = [issue.path for issue in collect_issues(CVForm, cv_payload)]
    assert paths == ["personalInfo.contactInfo.linkedin"]


def test_languages_entries_need_both_fields(cv_payload):
    cv_payload["languages"] = [{"language": "French"}]
    paths = [issue.path for issue in collect_issues(CVForm, cv_payload)]
    assert paths == ["languages.0.proficiency"]


def test_non_object_reported_at_root():
    issues = collect_issues(CVForm, "not a record")
    assert [issue.path for issue in issues] == [ROOT_PATH]


def test_model_instance_passes_through():
    request = EnhanceRequest(job_title="Dev", company="Acme", original_description=["Built things"])
    assert validate(EnhanceRequest, request) is request
    assert collect_issues(EnhanceRequest, request) == []


def test_data_uri_format_is_checked():
    issues = collect_issues(ParseRequest, {"pdfDataUri": "https://example.org/cv.pdf"})
    assert [issue.path for issue in issues] == ["pdfDataUri"]

    request = validate(ParseRequest, {"pdfDataUri": "data:application/pdf;base64,JVBERi0xLjQ="})
    assert request.file_name is None


def test_validation_error_carries_issue_dicts():
    with pytest.raises(ValidationError) as exc_info:
        validate(EnhanceRequest, {"jobTitle": "Dev", "company": "Acme", "originalDescription": []})

    assert [issue.to_dict() for issue in exc_info.value.issues] == [
        {"path": "originalDescription", "message": "At least 1 item(s) required"}
    ]


def test_request_errors_drop_body_location():
    errors = [
        {"type": "missing", "loc": ("body", "jobDescription"), "msg": "Field required"},
        {"type": "missing", "loc": ("body",), "msg": "Field required"},
    ]

    issues = [issue.to_dict() for issue in issues_from_errors(errors, location="body")]

    assert issues == [
        {"path": "jobDescription", "message": "Field is required"},
        {"path": ROOT_PATH, "message": "Field is required"},
    ]
