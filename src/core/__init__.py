"""
Core business logic modules for the readiness assessment

Contains:
- Question Bank: Static per-persona question catalog
- Scoring Engine: Normalized readiness score and stage
- Session State Machine: Pure assessment flow transitions
- Protocol Handler: Per-connection WebSocket driver
"""

from src.core.question_bank import QuestionBank, CatalogError
from src.core.scoring import compute_readiness, stage_from_score
from src.core.session_machine import (
    AssessmentStateMachine,
    StateTransitionError,
    TransitionResult,
)
from src.core.protocol_handler import AssessmentProtocolHandler

__all__ = [
    "QuestionBank",
    "CatalogError",
    "compute_readiness",
    "stage_from_score",
    "AssessmentStateMachine",
    "StateTransitionError",
    "TransitionResult",
    "AssessmentProtocolHandler",
]
