"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    CardioMetAgeError,
    BiomarkerError,
    BiomarkerParseError,
    UnknownBiomarkerError,
    NarrativeError,
    NarrativeServiceError,
    NarrativeDispatchError,
    SessionError,
    SessionNotFoundError,
    InsightInProgressError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "CardioMetAgeError",
    "BiomarkerError",
    "BiomarkerParseError",
    "UnknownBiomarkerError",
    "NarrativeError",
    "NarrativeServiceError",
    "NarrativeDispatchError",
    "SessionError",
    "SessionNotFoundError",
    "InsightInProgressError",
]
