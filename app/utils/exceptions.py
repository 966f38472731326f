"""
Custom Exception Hierarchy

Specific exception types for biomarker input, the narrative service and
assessment sessions, each carrying structured error information.
"""
from typing import Optional, Dict, Any


class CardioMetAgeError(Exception):
    """Base exception for all CardioMetAge errors."""
    
    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class BiomarkerError(CardioMetAgeError):
    """Errors related to biomarker fields and values."""


class BiomarkerParseError(BiomarkerError):
    """Raw user text could not be read as a finite number."""
    
    def __init__(
        self,
        message: str,
        raw_value: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="BIOMARKER_PARSE_ERROR",
            details={"raw_value": raw_value, **(details or {})}
        )
        self.raw_value = raw_value


class UnknownBiomarkerError(BiomarkerError):
    """Field name does not match any biomarker."""
    
    def __init__(
        self,
        field_name: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=f"Unknown biomarker field: {field_name!r}",
            code="UNKNOWN_BIOMARKER",
            details={"field": field_name, **(details or {})}
        )
        self.field_name = field_name


class NarrativeError(CardioMetAgeError):
    """Errors from the narrative (text generation) path."""


class NarrativeServiceError(NarrativeError):
    """The provider was called but failed. Recovered by the fallback insight."""
    
    def __init__(
        self,
        message: str,
        provider: str = "gemini",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="NARRATIVE_SERVICE_ERROR",
            details={"provider": provider, **(details or {})}
        )
        self.provider = provider


class NarrativeDispatchError(NarrativeError):
    """The request could not be issued at all (e.g. no client configured)."""
    
    def __init__(
        self,
        message: str,
        provider: str = "gemini",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="NARRATIVE_UNAVAILABLE",
            details={"provider": provider, **(details or {})}
        )
        self.provider = provider


class SessionError(CardioMetAgeError):
    """Errors related to assessment sessions."""


class SessionNotFoundError(SessionError):
    """No session exists with the given id."""
    
    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session not found: {session_id}",
            code="SESSION_NOT_FOUND",
            details={"session_id": session_id}
        )
        self.session_id = session_id


class InsightInProgressError(SessionError):
    """An insight request is already pending for this session."""
    
    def __init__(self, session_id: str):
        super().__init__(
            message="An insight request is already in progress",
            code="INSIGHT_IN_PROGRESS",
            details={"session_id": session_id}
        )
        self.session_id = session_id
