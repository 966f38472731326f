"""
Services Package - Assessment session state
"""
from .assessment import AssessmentSession, SessionStore

__all__ = ["AssessmentSession", "SessionStore"]
