"""
Assessment session and state models
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.models.question import Question


class SessionState(str, Enum):
    """Assessment state machine states."""

    UNSTARTED = "unstarted"  # Waiting for a start event
    IN_PROGRESS = "in_progress"  # Questions being asked
    COMPLETE = "complete"  # Terminal


class AnswerRecord(BaseModel):
    """A respondent's answer to one selected question."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    raw_answer: str | list[str] | None = None
    is_scoring: bool = False


class AssessmentSession(BaseModel):
    """
    Per-connection assessment state.

    Sessions are immutable values; each state machine transition returns
    a new session rather than mutating the current one.
    """

    model_config = ConfigDict(frozen=True)

    state: SessionState = SessionState.UNSTARTED
    persona: str | None = None

    # Questions & answers
    selected_questions: tuple[Question, ...] = Field(default_factory=tuple)
    cursor: int = Field(default=0, ge=0)
    answers: tuple[AnswerRecord, ...] = Field(default_factory=tuple)

    # Correlation id supplied by the client for the downstream report flow
    external_assessment_id: str | None = None

    @property
    def total(self) -> int:
        """Number of questions selected for this session."""
        return len(self.selected_questions)

    @property
    def answered(self) -> int:
        return len(self.answers)

    def get_current_question(self) -> Question | None:
        """Get the question awaiting an answer."""
        if self.cursor < self.total:
            return self.selected_questions[self.cursor]
        return None

    def accepts_answers(self) -> bool:
        """Whether an answer event would be recorded."""
        return self.state == SessionState.IN_PROGRESS and self.cursor < self.total


class CompletedAssessment(BaseModel):
    """Hand-off record passed to completion listeners."""

    assessment_id: str | None = None
    persona: str
    score: float
    stage: str
    answered: int
    total: int
    answers: list[AnswerRecord] = Field(default_factory=list)
