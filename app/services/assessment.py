"""
Assessment Sessions

Explicit state container for one user's biomarker edits and insight, plus
an in-memory store of sessions. Nothing is persisted.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Dict, Optional

from app.core.scoring import (
    BiomarkerRecord,
    CalculationResult,
    BASELINE_BIOMARKERS,
    coerce_biomarker_value,
    resolve_field,
    evaluate,
)
from app.core.llm import InsightOutcome, NarrativeService, build_narrative_request
from app.utils import get_logger, InsightInProgressError, SessionNotFoundError

logger = get_logger(__name__)


class AssessmentSession:
    """
    Current BiomarkerRecord, current insight and the loading flag.

    Every edit produces a new record and clears the insight. An insight
    that completes after the record changed is discarded.
    """

    def __init__(self, session_id: Optional[str] = None, record: BiomarkerRecord = BASELINE_BIOMARKERS):
        self.session_id = session_id or str(uuid.uuid4())
        self.created_at = datetime.now()
        self._record = record
        self._revision = 0
        self._insight: Optional[InsightOutcome] = None
        self._loading = False

    @property
    def record(self) -> BiomarkerRecord:
        return self._record

    @property
    def revision(self) -> int:
        return self._revision

    def current_result(self) -> CalculationResult:
        return evaluate(self._record)

    def current_insight(self) -> Optional[InsightOutcome]:
        return self._insight

    def is_insight_loading(self) -> bool:
        return self._loading

    def set_biomarker(self, field_name: str, raw_value: str) -> BiomarkerRecord:
        """Write interface: unparseable text becomes 0."""
        return self.apply_biomarker(field_name, coerce_biomarker_value(raw_value))

    def apply_biomarker(self, field_name: str, value: float) -> BiomarkerRecord:
        name = resolve_field(field_name)
        self._record = self._record.replace(name, value)
        self._revision += 1
        self._insight = None
        logger.debug(f"Session {self.session_id}: {name} = {value} (rev {self._revision})")
        return self._record

    def reset(self) -> BiomarkerRecord:
        self._record = BASELINE_BIOMARKERS
        self._revision += 1
        self._insight = None
        return self._record

    async def generate_insight(self, service: NarrativeService) -> InsightOutcome:
        """
        Request an insight for the current record.

        Raises:
            InsightInProgressError: a request is already pending
            NarrativeDispatchError: the request could not be sent
        """
        if self._loading:
            raise InsightInProgressError(self.session_id)

        record = self._record
        revision = self._revision
        request = build_narrative_request(record, evaluate(record))

        self._loading = True
        try:
            outcome = await service.request_insight(request)
        finally:
            self._loading = False

        if revision != self._revision:
            logger.info(
                f"Session {self.session_id}: biomarkers changed while insight was pending, "
                f"discarding result (rev {revision} -> {self._revision})"
            )
            return outcome

        self._insight = outcome
        return outcome


class SessionStore:
    """In-memory registry of assessment sessions."""

    def __init__(self):
        self._sessions: Dict[str, AssessmentSession] = {}

    def create(self, record: BiomarkerRecord = BASELINE_BIOMARKERS) -> AssessmentSession:
        session = AssessmentSession(record=record)
        self._sessions[session.session_id] = session
        logger.info(f"Created assessment session {session.session_id}")
        return session

    def get(self, session_id: str) -> AssessmentSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info(f"Deleted assessment session {session_id}")

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
