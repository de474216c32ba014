"""Section labels for rendered CVs, keyed by language code."""

TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "profileSummary": "Profile Summary",
        "workExperience": "Work Experience",
        "education": "Education",
        "skills": "Skills",
        "languages": "Languages",
        "candidateProfile": "Candidate Profile",
        "contactUponRequest": "Contact information available upon request.",
        "keyAchievementsProfile": "Key Achievements & Profile",
        "professionalJourney": "Professional Journey",
        "skillsSnapshot": "Skills Snapshot",
        "educationCredentials": "Education & Credentials",
        "professionalDetails": "Professional Details",
        "analyticsReportingSummary": "Analytics & Reporting",
        "deiAndCulturalFitStatement": "DEI & Cultural Fit",
        "searchCompletionMetricsSummary": "Search Completion Metrics",
        "toolsProficiency": "Tools",
        "at": "at",
    },
    "fr": {
        "profileSummary": "Résumé du Profil",
        "workExperience": "Expérience Professionnelle",
        "education": "Formation",
        "skills": "Compétences",
        "languages": "Langues",
        "candidateProfile": "Profil du Candidat",
        "contactUponRequest": "Coordonnées disponibles sur demande.",
        "keyAchievementsProfile": "Réalisations Clés & Profil",
        "professionalJourney": "Parcours Professionnel",
        "skillsSnapshot": "Aperçu des Compétences",
        "educationCredentials": "Formation & Diplômes",
        "professionalDetails": "Informations Professionnelles",
        "analyticsReportingSummary": "Analyse & Reporting",
        "deiAndCulturalFitStatement": "Diversité & Adéquation Culturelle",
        "searchCompletionMetricsSummary": "Indicateurs de Recrutement",
        "toolsProficiency": "Outils",
        "at": "chez",
    },
}


def get_translations(language: str | None) -> dict[str, str]:
    """Label table for ``language``; English when unknown."""
    code = (language or "").strip().lower()[:2]
    return TRANSLATIONS.get(code, TRANSLATIONS["en"])
