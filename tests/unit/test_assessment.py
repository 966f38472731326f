"""
Unit Tests for Assessment Sessions

Write interface, insight lifecycle, loading flag and stale-result handling.
"""
import asyncio
import pytest

from app.core.scoring import BASELINE_BIOMARKERS, evaluate
from app.core.llm import (
    NarrativeService,
    GeminiClient,
    GeminiConfig,
    InsightOutcome,
    InsightSource,
    FALLBACK_INSIGHT,
)
from app.services import AssessmentSession, SessionStore
from app.utils import (
    InsightInProgressError,
    NarrativeDispatchError,
    SessionNotFoundError,
    UnknownBiomarkerError,
)


class BlockingNarrativeService:
    """Holds every request open until ``release`` is set."""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.requests = []

    async def request_insight(self, request):
        self.requests.append(request)
        self.started.set()
        await self.release.wait()
        return InsightOutcome(insight=FALLBACK_INSIGHT, source=InsightSource.FALLBACK, reason="test")


@pytest.fixture
def session() -> AssessmentSession:
    return AssessmentSession()


@pytest.fixture
def service(gemini_reply, service_insight_json) -> NarrativeService:
    return NarrativeService(gemini_reply(service_insight_json))


class TestSessionState:
    """Read and write interface."""

    def test_starts_at_baseline(self, session):
        assert session.record == BASELINE_BIOMARKERS
        assert session.current_result() == evaluate(BASELINE_BIOMARKERS)
        assert session.current_insight() is None
        assert not session.is_insight_loading()

    def test_set_biomarker_parses(self, session):
        session.set_biomarker("crp", "4.5")
        assert session.record.crp == 4.5
        assert session.current_result() == evaluate(BASELINE_BIOMARKERS.replace("crp", 4.5))

    @pytest.mark.parametrize("field_name", ["age", "hba1c", "sbp", "lymphocyte_percent", "bun"])
    def test_non_numeric_becomes_zero(self, session, field_name):
        session.set_biomarker(field_name, "abc")

        after = session.record.to_dict()
        assert after.pop(field_name) == 0.0
        before = BASELINE_BIOMARKERS.to_dict()
        before.pop(field_name)
        assert after == before

    def test_empty_input_becomes_zero(self, session):
        session.set_biomarker("wc", "")
        assert session.record.wc == 0.0

    def test_set_biomarker_accepts_alias(self, session):
        session.set_biomarker("pulseRate", "64")
        assert session.record.pulse_rate == 64.0

    def test_unknown_field(self, session):
        with pytest.raises(UnknownBiomarkerError):
            session.set_biomarker("ldl", "100")
        assert session.revision == 0

    def test_apply_biomarker(self, session):
        session.apply_biomarker("mcv", 92.5)
        assert session.record.mcv == 92.5
        assert session.revision == 1

    def test_reset(self, session):
        session.set_biomarker("age", "60")
        session.reset()
        assert session.record == BASELINE_BIOMARKERS
        assert session.current_insight() is None


class TestInsightLifecycle:
    """Generating, clearing and discarding insights."""

    async def test_generate_stores_insight(self, session, service):
        outcome = await session.generate_insight(service)

        assert outcome.source == InsightSource.SERVICE
        assert session.current_insight() is outcome
        assert not session.is_insight_loading()

    async def test_edit_clears_insight(self, session, service):
        await session.generate_insight(service)
        session.set_biomarker("hba1c", "abc")

        assert session.current_insight() is None
        assert session.record.hba1c == 0.0

    async def test_fallback_is_stored(self, session, gemini_failure):
        service = NarrativeService(gemini_failure(ConnectionError("offline")))
        outcome = await session.generate_insight(service)

        assert outcome.is_fallback
        assert session.current_insight().insight == FALLBACK_INSIGHT

    async def test_dispatch_error_leaves_insight_absent(self, session):
        service = NarrativeService(GeminiClient(GeminiConfig(api_key=None)))

        with pytest.raises(NarrativeDispatchError):
            await session.generate_insight(service)

        assert session.current_insight() is None
        assert not session.is_insight_loading()

    async def test_loading_flag_and_reentry(self, session):
        service = BlockingNarrativeService()
        task = asyncio.create_task(session.generate_insight(service))
        await service.started.wait()

        assert session.is_insight_loading()
        with pytest.raises(InsightInProgressError):
            await session.generate_insight(service)

        service.release.set()
        await task

        assert not session.is_insight_loading()
        assert session.current_insight() is not None
        assert len(service.requests) == 1

    async def test_edit_while_pending_discards_result(self, session):
        service = BlockingNarrativeService()
        task = asyncio.create_task(session.generate_insight(service))
        await service.started.wait()

        session.set_biomarker("crp", "8")
        service.release.set()
        outcome = await task

        assert outcome.is_fallback
        assert session.current_insight() is None
        assert session.record.crp == 8.0

    async def test_request_uses_snapshot(self, session):
        service = BlockingNarrativeService()
        session.set_biomarker("hba1c", "6.4")
        task = asyncio.create_task(session.generate_insight(service))
        await service.started.wait()
        session.set_biomarker("hba1c", "9.9")
        service.release.set()
        await task

        assert "- HbA1c: 6.4%" in service.requests[0].prompt


class TestSessionStore:
    """Tests for SessionStore."""

    def test_create_and_get(self):
        store = SessionStore()
        session = store.create()

        assert store.get(session.session_id) is session
        assert session.session_id in store
        assert len(store) == 1

    def test_sessions_are_independent(self):
        store = SessionStore()
        a, b = store.create(), store.create()
        a.set_biomarker("age", "70")

        assert b.record.age == 40.0
        assert a.session_id != b.session_id

    def test_get_missing(self):
        with pytest.raises(SessionNotFoundError) as exc_info:
            SessionStore().get("nope")
        assert exc_info.value.to_dict()["error"] == "SESSION_NOT_FOUND"

    def test_delete(self):
        store = SessionStore()
        session = store.create()
        store.delete(session.session_id)

        assert len(store) == 0
        with pytest.raises(SessionNotFoundError):
            store.delete(session.session_id)
