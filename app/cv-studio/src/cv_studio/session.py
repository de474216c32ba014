"""Per-session CV state and the in-memory store holding it."""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .llm.prompt_builder import join_bullets
from .schemas import CVData, ParsedCV, SectionType

logger = logging.getLogger(__name__)

# Fields that belong to the session, never to a parse result
SESSION_ONLY_FIELDS = {"photo", "file_name"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CVSession:
    """The CV record being edited, plus the parse projection it was built from."""

    session_id: str
    cv_data: CVData | None = None
    parsed_cv_data: CVData | None = None
    is_loading: bool = False
    error: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def _touch(self) -> None:
        self.updated_at = _utcnow()

    def set_full(self, data: CVData | None) -> None:
        """Replace the whole record and re-derive the parsed projection."""
        self.cv_data = data
        if data is None:
            self.parsed_cv_data = None
        else:
            self.parsed_cv_data = data.model_copy(update={name: None for name in SESSION_ONLY_FIELDS})
        self._touch()

    def set_parsed_subset(self, data: ParsedCV | None) -> None:
        """Merge a fresh parse over the current record, keeping photo and file name."""
        if data is None:
            self.parsed_cv_data = None
            self.cv_data = None
            self._touch()
            return

        previous = self.cv_data or CVData.empty()
        merged = previous.model_dump()
        merged.update(data.model_dump(exclude_unset=True, exclude=SESSION_ONLY_FIELDS))
        merged["photo"] = previous.photo or None
        merged["file_name"] = previous.file_name or None

        self.cv_data = CVData.model_validate(merged)
        self.parsed_cv_data = CVData.model_validate(
            {**CVData.empty().model_dump(), **data.model_dump(exclude_unset=True, exclude=SESSION_ONLY_FIELDS)}
        )
        self._touch()

    def apply_enhanced_description(self, index: int, bullets: list[str]) -> None:
        """Write enhanced bullets back into one experience entry."""
        if self.cv_data is None:
            raise LookupError("Session has no CV data")
        experience = list(self.cv_data.experience)
        if not 0 <= index < len(experience):
            raise IndexError(f"No experience entry at index {index}")
        experience[index] = experience[index].model_copy(update={"description": join_bullets(bullets)})
        self.cv_data = self.cv_data.model_copy(update={"experience": experience})
        self._touch()

    def apply_generated_detail(self, section: SectionType, text: str) -> None:
        """Store generated text in its professional-detail field."""
        if self.cv_data is None:
            raise LookupError("Session has no CV data")
        field_name = {
            SectionType.ANALYTICS_REPORTING_SUMMARY: "analytics_reporting_summary",
            SectionType.DEI_AND_CULTURAL_FIT_STATEMENT: "dei_and_cultural_fit_statement",
            SectionType.SEARCH_COMPLETION_METRICS_SUMMARY: "search_completion_metrics_summary",
        }[section]
        self.cv_data = self.cv_data.model_copy(update={field_name: text})
        self._touch()


class SessionStore:
    """In-memory session store guarded by an asyncio lock."""

    def __init__(self, max_sessions: int = 500):
        self._sessions: dict[str, CVSession] = {}
        self._lock = asyncio.Lock()
        self._max_sessions = max_sessions

    async def create_session(self) -> CVSession:
        """Create an empty session and return it."""
        session = CVSession(session_id=str(uuid.uuid4()))

        async with self._lock:
            # Evict the least recently updated sessions at capacity
            if len(self._sessions) >= self._max_sessions:
                self._evict_oldest()

            self._sessions[session.session_id] = session

        logger.info(f"Created session {session.session_id}")
        return session

    async def get_session(self, session_id: str) -> CVSession | None:
        """Get a session by ID."""
        async with self._lock:
            return self._sessions.get(session_id)

    async def delete_session(self, session_id: str) -> bool:
        """Drop a session; returns False when it did not exist."""
        async with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed:
            logger.info(f"Deleted session {session_id}")
        return removed is not None

    def _evict_oldest(self) -> None:
        overflow = len(self._sessions) - self._max_sessions + 1
        by_age = sorted(self._sessions.values(), key=lambda s: s.updated_at)
        for session in by_age[:overflow]:
            del self._sessions[session.session_id]
        logger.info(f"Evicted {overflow} old session(s)")
