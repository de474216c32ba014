import pytest

from cv_studio.errors import UnknownTemplateError
from cv_studio.rendering import TEMPLATES, get_translations, render_cv_html
from cv_studio.schemas import CVData

PHOTO = "data:image/png;base64,iVBORw0KGgo="


@pytest.fixture
def cv(cv_payload):
    return CVData.model_validate({**cv_payload, "photo": PHOTO})


def test_template_registry():
    assert list(TEMPLATES) == ["classic", "photoRight", "anonymized", "marketing", "finance"]
    assert TEMPLATES["photoRight"].name == "Photo Right"


def test_classic_renders_english_sections(cv):
    html = render_cv_html(cv, "classic")

    assert "Ada Lovelace" in html
    assert "ada@lovelace.dev" in html
    assert "Work Experience" in html
    assert "Analyst at Analytical Engine Co" in html
    assert "<li>Wrote the first published algorithm</li>" in html
    assert "<li>Annotated the Menabrea paper</li>" in html
    assert "English: Native" in html
    assert PHOTO in html


def test_french_cv_uses_french_labels(cv):
    html = render_cv_html(cv.model_copy(update={"detected_language": "fr"}), "classic")

    assert 'lang="fr"' in html
    assert "Expérience Professionnelle" in html
    assert "Compétences" in html
    assert "Analyst chez Analytical Engine Co" in html
    assert "Work Experience" not in html


def test_unknown_language_falls_back_to_english():
    assert get_translations("de") == get_translations("en")
    assert get_translations(None)["skills"] == "Skills"


def test_anonymized_hides_identity(cv):
    html = render_cv_html(cv, "anonymized")

    assert "Ada Lovelace" not in html
    assert "ada@lovelace.dev" not in html
    assert "linkedin.com" not in html
    assert PHOTO not in html
    assert "Candidate Profile" in html
    assert "Contact information available upon request." in html
    assert "Work Experience" in html


def test_anonymized_in_french(cv):
    html = render_cv_html(cv.model_copy(update={"detected_language": "fr"}), "anonymized")

    assert "Profil du Candidat" in html
    assert "Coordonnées disponibles sur demande." in html


def test_marketing_orders_skills_before_education(cv):
    html = render_cv_html(cv, "marketing")

    journey = html.index("Professional Journey")
    snapshot = html.index("Skills Snapshot")
    education = html.index('class="education"')
    assert journey < snapshot < education
    assert '<ul class="chips">' in html


def test_photo_right_layout(cv):
    html = render_cv_html(cv, "photoRight")
    assert 'class="photo-right"' in html
    assert PHOTO in html


def test_details_section_only_when_filled(cv):
    assert "Professional Details" not in render_cv_html(cv, "finance")

    filled = cv.model_copy(update={"analytics_reporting_summary": "Built weekly pipeline dashboards."})
    html = render_cv_html(filled, "finance")
    assert "Professional Details" in html
    assert "Built weekly pipeline dashboards." in html


def test_values_are_escaped(cv):
    hostile = cv.model_copy(update={"profile": "<script>alert(1)</script>"})
    html = render_cv_html(hostile, "classic")

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_unknown_template(cv):
    with pytest.raises(UnknownTemplateError) as exc_info:
        render_cv_html(cv, "brutalist")

    assert isinstance(exc_info.value, KeyError)
    assert exc_info.value.template_id == "brutalist"


def test_linkedin_link_only_for_web_urls(cv):
    html = render_cv_html(cv, "classic")
    assert '<a href="https://www.linkedin.com/in/ada">' in html

    contact = cv.personal_info.contact_info.model_copy(update={"linkedin": "javascript:alert(document.cookie)"})
    personal_info = cv.personal_info.model_copy(update={"contact_info": contact})
    html = render_cv_html(cv.model_copy(update={"personal_info": personal_info}), "classic")

    assert 'href="javascript' not in html
    assert "<span>javascript:alert(document.cookie)</span>" in html


def test_photo_must_be_an_image_data_uri(cv):
    html = render_cv_html(cv.model_copy(update={"photo": "javascript:alert(1)"}), "classic")
    assert "<img" not in html
