"""FastAPI application for the CV studio service."""

import logging
from contextlib import contextmanager
from typing import Annotated, Any

from fastapi import Body, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from .config import settings
from .errors import CVStudioError, InvalidResponseError, TransportFailure, UnknownTemplateError, ValidationError
from .extractors import to_data_uri
from .llm import LLMConfig, analyze_job_match, enhance_experience, generate_professional_detail, parse_cv
from .llm.prompt_builder import split_bullets
from .rendering import TEMPLATES, render_cv_html
from .schemas import (
    AnalyzeRequestBody,
    CVContext,
    CVData,
    CVForm,
    EnhanceRequestBody,
    GenerateDetailRequestBody,
    HealthResponse,
    LLMConfigRequest,
    ParseRequestBody,
    SectionType,
    SessionActionRequest,
    SessionAnalyzeRequest,
    SessionResponse,
    TemplateInfo,
)
from .session import CVSession, SessionStore
from .validation import issues_from_errors, validate

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="CV Studio Service",
    description="Parse, edit, enhance and render CVs with an LLM",
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

session_store = SessionStore(max_sessions=settings.MAX_SESSIONS)


# --- Error mapping ---


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.error(f"{request.url.path}: {exc}")
    return JSONResponse(
        status_code=422,
        content={"error": "validation_error", "issues": [issue.to_dict() for issue in exc.issues]},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return await validation_error_handler(request, ValidationError(issues_from_errors(exc.errors(), location="body")))


@app.exception_handler(InvalidResponseError)
async def invalid_response_handler(request: Request, exc: InvalidResponseError):
    logger.error(f"{request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": exc.public_message})


@app.exception_handler(TransportFailure)
async def transport_failure_handler(request: Request, exc: TransportFailure):
    logger.error(f"{request.url.path}: LLM call failed: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(UnknownTemplateError)
async def unknown_template_handler(request: Request, exc: UnknownTemplateError):
    logger.error(f"{request.url.path}: {exc}")
    return JSONResponse(status_code=404, content={"detail": str(exc)})


# --- Helpers ---


def _build_llm_config(config_request: LLMConfigRequest | None) -> LLMConfig | None:
    """Convert LLMConfigRequest to LLMConfig for providers."""
    if not config_request:
        return None
    if not config_request.llm_endpoint:
        return None
    return LLMConfig(
        endpoint=config_request.llm_endpoint,
        model=config_request.llm_model,
        api_key=config_request.llm_api_key,
    )


async def _require_session(session_id: str) -> CVSession:
    session = await session_store.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return session


def _require_cv(session: CVSession) -> CVData:
    if session.cv_data is None:
        raise HTTPException(status_code=404, detail="Session has no CV data")
    return session.cv_data


def _session_response(session: CVSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        cv_data=session.cv_data.to_wire() if session.cv_data else None,
        parsed_cv_data=session.parsed_cv_data.to_wire() if session.parsed_cv_data else None,
        is_loading=session.is_loading,
        error=session.error,
    )


@contextmanager
def _tracking(session: CVSession):
    """Mark a session busy for the duration of an LLM operation and record failures."""
    if session.is_loading:
        raise HTTPException(status_code=409, detail="Session is busy with another LLM operation")
    session.is_loading = True
    session.error = None
    try:
        yield
    except CVStudioError as e:
        session.error = str(e)
        raise
    finally:
        session.is_loading = False


# --- Service ---


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", service=settings.SERVICE_NAME)


@app.get("/templates", response_model=list[TemplateInfo])
async def list_templates():
    """List the available presentation templates."""
    return [TemplateInfo(id=style.id, name=style.name) for style in TEMPLATES.values()]


# --- Stateless LLM operations ---


@app.post("/cv/parse")
async def parse_cv_endpoint(body: ParseRequestBody):
    """
    Extract structured CV data from a PDF data URI.

    When ``sessionId`` is given, the result is merged into that session's record.
    """
    session = await _require_session(body.session_id) if body.session_id else None
    llm_config = _build_llm_config(body.llm_config)

    if session is None:
        parsed = await parse_cv(body, llm_config)
    else:
        with _tracking(session):
            parsed = await parse_cv(body, llm_config)
        session.set_parsed_subset(parsed)

    logger.info(f"Parsed CV for {parsed.personal_info.name or 'unnamed candidate'}")
    return parsed.to_wire()


@app.post("/cv/upload")
async def upload_cv(
    file: Annotated[UploadFile, File(description="CV file (PDF)")],
    session_id: Annotated[str | None, Form()] = None,
    llm_endpoint: Annotated[str | None, Form()] = None,
    llm_model: Annotated[str | None, Form()] = None,
    llm_api_key: Annotated[str | None, Form()] = None,
):
    """
    Parse an uploaded PDF CV.

    With a ``session_id`` the parsed CV replaces the session record, tagged with
    the uploaded file name.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")
    if not file.filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=400, detail="Unsupported file format. Supported: ['pdf']")

    session = await _require_session(session_id) if session_id else None

    # Read file content
    try:
        content = await file.read()
    except Exception as e:
        logger.error(f"Failed to read file: {e}")
        raise HTTPException(status_code=400, detail="Failed to read file") from e

    # Check file size
    max_size = settings.MAX_FILE_SIZE_MB * 1024 * 1024
    if len(content) > max_size:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max size: {settings.MAX_FILE_SIZE_MB}MB",
        )
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")

    llm_config = _build_llm_config(
        LLMConfigRequest(llm_endpoint=llm_endpoint, llm_model=llm_model, llm_api_key=llm_api_key)
    )
    payload = {"pdfDataUri": to_data_uri(content), "fileName": file.filename}

    if session is None:
        parsed = await parse_cv(payload, llm_config)
    else:
        with _tracking(session):
            parsed = await parse_cv(payload, llm_config)
        session.set_full(CVData.model_validate({**parsed.model_dump(), "file_name": file.filename, "photo": None}))

    logger.info(f"Successfully parsed {file.filename}")
    return parsed.to_wire()


@app.post("/cv/enhance")
async def enhance_endpoint(body: EnhanceRequestBody):
    """Rewrite experience bullet points."""
    result = await enhance_experience(body, _build_llm_config(body.llm_config))
    return result.to_wire()


@app.post("/cv/analyze")
async def analyze_endpoint(body: AnalyzeRequestBody):
    """Score a CV against a job description."""
    result = await analyze_job_match(body, _build_llm_config(body.llm_config))
    return result.to_wire()


@app.post("/cv/generate-detail")
async def generate_detail_endpoint(body: GenerateDetailRequestBody):
    """Draft a professional-detail paragraph."""
    result = await generate_professional_detail(body, _build_llm_config(body.llm_config))
    return result.to_wire()


# --- Sessions ---


@app.post("/sessions", response_model=SessionResponse)
async def create_session():
    """Start an editing session with an empty record."""
    session = await session_store.create_session()
    return _session_response(session)


@app.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str):
    session = await _require_session(session_id)
    return _session_response(session)


@app.put("/sessions/{session_id}", response_model=SessionResponse)
async def save_session(session_id: str, payload: Annotated[dict[str, Any], Body()]):
    """Save an edited CV. The record must pass the edit-form constraints."""
    session = await _require_session(session_id)
    validate(CVForm, payload)
    record = {"languages": [], **payload}
    if record.get("languages") is None:
        record["languages"] = []
    session.set_full(validate(CVData, record))
    logger.info(f"Saved CV for session {session_id}")
    return _session_response(session)


@app.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    if not await session_store.delete_session(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"deleted": True, "session_id": session_id}


@app.get("/sessions/{session_id}/preview", response_class=HTMLResponse)
async def preview_session(session_id: str, template: str = "classic"):
    """Render the session's CV as HTML with the requested template."""
    session = await _require_session(session_id)
    html = render_cv_html(_require_cv(session), template)
    return HTMLResponse(content=html)


@app.post("/sessions/{session_id}/experience/{index}/enhance", response_model=SessionResponse)
async def enhance_session_experience(
    session_id: str,
    index: int,
    body: Annotated[SessionActionRequest | None, Body()] = None,
):
    """Enhance one experience entry of the session record and write the bullets back."""
    body = body or SessionActionRequest()
    session = await _require_session(session_id)
    cv = _require_cv(session)
    if not 0 <= index < len(cv.experience):
        raise HTTPException(status_code=404, detail=f"No experience entry at index {index}")

    experience = cv.experience[index]
    request = {
        "jobTitle": experience.title,
        "company": experience.company,
        "originalDescription": split_bullets(experience.description),
        "language": body.language,
    }

    with _tracking(session):
        result = await enhance_experience(request, _build_llm_config(body.llm_config))
    session.apply_enhanced_description(index, result.enhanced_description)
    return _session_response(session)


@app.post("/sessions/{session_id}/details/{section_type}", response_model=SessionResponse)
async def generate_session_detail(
    session_id: str,
    section_type: SectionType,
    body: Annotated[SessionActionRequest | None, Body()] = None,
):
    """Generate one professional-detail section from the session record and store it."""
    body = body or SessionActionRequest()
    session = await _require_session(session_id)
    cv = _require_cv(session)

    current_text = {
        SectionType.ANALYTICS_REPORTING_SUMMARY: cv.analytics_reporting_summary,
        SectionType.DEI_AND_CULTURAL_FIT_STATEMENT: cv.dei_and_cultural_fit_statement,
        SectionType.SEARCH_COMPLETION_METRICS_SUMMARY: cv.search_completion_metrics_summary,
    }[section_type]
    request = {
        "sectionType": section_type.value,
        "cvContext": CVContext.from_cv(cv).to_wire(),
        "currentText": current_text or None,
        "language": body.language,
    }

    with _tracking(session):
        result = await generate_professional_detail(request, _build_llm_config(body.llm_config))
    session.apply_generated_detail(section_type, result.generated_text)
    return _session_response(session)


@app.post("/sessions/{session_id}/analyze")
async def analyze_session(session_id: str, body: SessionAnalyzeRequest):
    """Analyze the session record against a job description."""
    session = await _require_session(session_id)
    cv = _require_cv(session)
    request = {
        "cvData": CVContext.from_cv(cv).to_wire(),
        "jobDescription": body.job_description,
        "language": body.language,
    }

    with _tracking(session):
        result = await analyze_job_match(request, _build_llm_config(body.llm_config))
    return result.to_wire()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8084)  # nosec B104 - Docker container
