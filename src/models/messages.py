"""
Wire messages for the assessment WebSocket protocol.

Inbound:
- start: choose a persona and begin
- answer: answer the current question

Outbound:
- ack, question, complete, error
"""

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.question import Question


# ============================================================================
# INBOUND
# ============================================================================

class StartMessage(BaseModel):
    """Client request to begin an assessment."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["start"] = "start"
    persona: str | None = None
    assessment_id: str | None = Field(default=None, alias="assessmentId")

    @field_validator("assessment_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        # Opaque token; numeric ids from the client are kept as text
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class AnswerMessage(BaseModel):
    """Client answer to the current question."""

    type: Literal["answer"] = "answer"
    answer: str | list[str] | None = None


InboundMessage = StartMessage | AnswerMessage

INBOUND_TYPES: dict[str, type[BaseModel]] = {
    "start": StartMessage,
    "answer": AnswerMessage,
}


class MalformedMessageError(ValueError):
    """Raised when an inbound frame cannot be understood."""
    pass


def parse_inbound(raw: str | bytes) -> InboundMessage | None:
    """
    Parse a raw inbound frame.

    Returns None for well-formed messages of an unknown type, which the
    protocol ignores.

    Raises:
        MalformedMessageError: If the frame is not a valid JSON object or
            does not match its message schema
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedMessageError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedMessageError("Message must be a JSON object")

    message_type = data.get("type")
    model = INBOUND_TYPES.get(message_type) if isinstance(message_type, str) else None
    if model is None:
        return None

    try:
        return model.model_validate(data)
    except ValueError as e:
        raise MalformedMessageError(str(e)) from e


# ============================================================================
# OUTBOUND
# ============================================================================

class OutboundMessage(BaseModel):
    """Base for server-to-client messages."""

    type: str

    def to_wire(self) -> dict[str, Any]:
        """Serialize for sending, omitting unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class AckMessage(OutboundMessage):
    type: Literal["ack"] = "ack"
    persona: str
    total: int


class QuestionPayload(BaseModel):
    """Client-facing view of a question."""

    id: str
    text: str
    type: str
    options: list[str]
    scoring: bool
    score_map: dict[str, int] | None = None

    @classmethod
    def from_question(cls, question: Question, include_score_map: bool = True) -> "QuestionPayload":
        return cls(
            id=question.id,
            text=question.text,
            type=question.type.value,
            options=list(question.options),
            scoring=question.is_scoring,
            score_map=dict(question.score_map) if include_score_map and question.score_map else None,
        )


class QuestionMessage(OutboundMessage):
    type: Literal["question"] = "question"
    question: QuestionPayload
    index: int = Field(..., ge=1, description="1-based position")
    total: int


class CompleteMessage(OutboundMessage):
    type: Literal["complete"] = "complete"
    assessment_id: str | None = None
    score: float
    stage: str
    answered: int
    total: int

    def to_wire(self) -> dict[str, Any]:
        # assessment_id is always present, null when the client sent none
        return self.model_dump(mode="json")


class ErrorMessage(OutboundMessage):
    type: Literal["error"] = "error"
    message: str
