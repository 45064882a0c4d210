"""
Data models and schemas for the readiness assessment

Contains Pydantic models for:
- Catalog questions and personas
- Assessment sessions and answers
- Readiness results
- WebSocket protocol messages
"""

from src.models.question import Question, QuestionType
from src.models.personas import Persona, persona_label
from src.models.assessment import (
    AssessmentSession,
    AnswerRecord,
    CompletedAssessment,
    SessionState,
)
from src.models.readiness import ReadinessResult, ReadinessStage
from src.models.messages import (
    AckMessage,
    AnswerMessage,
    CompleteMessage,
    ErrorMessage,
    MalformedMessageError,
    OutboundMessage,
    QuestionMessage,
    QuestionPayload,
    StartMessage,
    parse_inbound,
)

__all__ = [
    # Question
    "Question",
    "QuestionType",
    # Personas
    "Persona",
    "persona_label",
    # Assessment
    "AssessmentSession",
    "AnswerRecord",
    "CompletedAssessment",
    "SessionState",
    # Readiness
    "ReadinessResult",
    "ReadinessStage",
    # Messages
    "AckMessage",
    "AnswerMessage",
    "CompleteMessage",
    "ErrorMessage",
    "MalformedMessageError",
    "OutboundMessage",
    "QuestionMessage",
    "QuestionPayload",
    "StartMessage",
    "parse_inbound",
]
