"""
CardioMetAge API - FastAPI Application

Main application entry point with API endpoints for:
- Stateless CardioMetAge evaluation
- Assessment sessions (biomarker edits, current result)
- Narrative insights (Gemini, with fallback)
"""
from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from typing import List
from datetime import datetime

from app.config import settings
from app.core.scoring import BASELINE_BIOMARKERS, BIOMARKER_FIELDS, evaluate
from app.core.llm import NarrativeService
from app.services import AssessmentSession, SessionStore
from app.utils import get_logger, setup_logging, CardioMetAgeError
from app.models.assessment import (
    BiomarkerInput,
    BiomarkerUpdate,
    CalculationResponse,
    EvaluationResponse,
    InsightResponse,
    SessionResponse,
    BiomarkerFieldResponse,
    HealthResponse,
)

setup_logging(settings.log_level, settings.log_file, settings.log_module_levels)
logger = get_logger(__name__)


# ---- FastAPI Application ----

app = FastAPI(
    title="CardioMetAge API",
    description="Cardiometabolic biological-age estimation with AI-generated insights",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- In-memory state (nothing persists across restarts) ----
_sessions = SessionStore()
_narrative_service = None
START_TIME = datetime.now()

_ERROR_STATUS = {
    "BIOMARKER_PARSE_ERROR": 422,
    "UNKNOWN_BIOMARKER": 404,
    "SESSION_NOT_FOUND": 404,
    "INSIGHT_IN_PROGRESS": 409,
    "NARRATIVE_UNAVAILABLE": 503,
}


def get_session_store() -> SessionStore:
    return _sessions


def get_narrative_service() -> NarrativeService:
    """Lazily build the shared NarrativeService."""
    global _narrative_service
    if _narrative_service is None:
        _narrative_service = NarrativeService()
    return _narrative_service


@app.exception_handler(CardioMetAgeError)
async def cardiometage_error_handler(request: Request, exc: CardioMetAgeError):
    status_code = _ERROR_STATUS.get(exc.code, 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# ---- Utility Functions ----

def _session_response(session: AssessmentSession) -> SessionResponse:
    outcome = session.current_insight()
    return SessionResponse(
        session_id=session.session_id,
        revision=session.revision,
        biomarkers=session.record.to_dict(),
        result=CalculationResponse.from_result(session.current_result()),
        insight=InsightResponse.from_outcome(outcome) if outcome else None,
        insight_loading=session.is_insight_loading(),
    )


def _health(store: SessionStore, service: NarrativeService) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        uptime_seconds=(datetime.now() - START_TIME).total_seconds(),
        narrative_service=service.get_stats(),
        active_sessions=len(store),
        timestamp=datetime.now().isoformat(),
    )


# ---- API Endpoints ----

@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root(
    store: SessionStore = Depends(get_session_store),
    service: NarrativeService = Depends(get_narrative_service),
):
    """API root - health check."""
    return _health(store, service)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(
    store: SessionStore = Depends(get_session_store),
    service: NarrativeService = Depends(get_narrative_service),
):
    """Health check endpoint."""
    return _health(store, service)


@app.get("/api/v1/biomarkers/fields", response_model=List[BiomarkerFieldResponse], tags=["Reference"])
async def list_biomarker_fields():
    """Labels, units and categories for every biomarker input."""
    return [BiomarkerFieldResponse(**f.to_dict()) for f in BIOMARKER_FIELDS.values()]


@app.get("/api/v1/biomarkers/baseline", tags=["Reference"])
async def get_baseline():
    """Default biomarker values a new session starts from."""
    return BASELINE_BIOMARKERS.to_dict()


@app.post("/api/v1/evaluate", response_model=EvaluationResponse, tags=["Scoring"])
async def evaluate_biomarkers(request: BiomarkerInput):
    """Evaluate a full biomarker set without creating a session."""
    record = request.to_record()
    return EvaluationResponse(
        biomarkers=record.to_dict(),
        result=CalculationResponse.from_result(evaluate(record)),
    )


@app.post("/api/v1/sessions", response_model=SessionResponse, status_code=201, tags=["Sessions"])
async def create_session(store: SessionStore = Depends(get_session_store)):
    """Start a session at the baseline biomarkers."""
    return _session_response(store.create())


@app.get("/api/v1/sessions/{session_id}", response_model=SessionResponse, tags=["Sessions"])
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    return _session_response(store.get(session_id))


@app.delete("/api/v1/sessions/{session_id}", status_code=204, tags=["Sessions"])
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.delete(session_id)


@app.post("/api/v1/sessions/{session_id}/reset", response_model=SessionResponse, tags=["Sessions"])
async def reset_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Restore baseline biomarkers and clear the insight."""
    session = store.get(session_id)
    session.reset()
    return _session_response(session)


@app.put("/api/v1/sessions/{session_id}/biomarkers/{field_name}", response_model=SessionResponse, tags=["Sessions"])
async def set_biomarker(
    session_id: str,
    field_name: str,
    update: BiomarkerUpdate,
    store: SessionStore = Depends(get_session_store),
):
    """
    Replace one biomarker from raw user text.

    Non-numeric or empty text is stored as 0. Any existing insight is cleared.
    """
    session = store.get(session_id)
    session.set_biomarker(field_name, update.value)
    return _session_response(session)


@app.get("/api/v1/sessions/{session_id}/result", response_model=CalculationResponse, tags=["Sessions"])
async def get_result(session_id: str, store: SessionStore = Depends(get_session_store)):
    return CalculationResponse.from_result(store.get(session_id).current_result())


@app.get("/api/v1/sessions/{session_id}/insight", tags=["Insights"])
async def get_insight(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Current insight, or null when none has been generated for these values."""
    session = store.get(session_id)
    outcome = session.current_insight()
    return {
        "insight": InsightResponse.from_outcome(outcome).model_dump() if outcome else None,
        "insight_loading": session.is_insight_loading(),
    }


@app.post("/api/v1/sessions/{session_id}/insight", response_model=InsightResponse, tags=["Insights"])
async def generate_insight(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    service: NarrativeService = Depends(get_narrative_service),
):
    """
    Generate a narrative insight for the session's current biomarkers.

    Returns 409 while another request for the same session is pending and
    503 when the narrative service is not configured.
    """
    session = store.get(session_id)
    outcome = await session.generate_insight(service)
    return InsightResponse.from_outcome(outcome)


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
