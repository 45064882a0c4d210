"""
Assessment Session State Machine

Walks a respondent through a persona's questionnaire. Transitions are a
pure function of (session, event) returning the next session plus the
messages to send; no transport is involved, so the whole flow can be
driven directly in tests.
"""

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.core.question_bank import QuestionBank
from src.core.scoring import compute_readiness
from src.models.assessment import AnswerRecord, AssessmentSession, SessionState
from src.models.messages import (
    AckMessage,
    AnswerMessage,
    CompleteMessage,
    ErrorMessage,
    InboundMessage,
    OutboundMessage,
    QuestionMessage,
    QuestionPayload,
    StartMessage,
)
from src.models.readiness import ReadinessResult

logger = logging.getLogger(__name__)


NO_QUESTIONS_MESSAGE = "No questions found for persona."
MISSING_PERSONA_MESSAGE = "Missing persona."


class StateTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


class CloseMode(str, Enum):
    """How the connection should be terminated after a transition."""

    IMMEDIATE = "immediate"
    AFTER_GRACE = "after_grace"


class CloseDirective(BaseModel):
    """Instruction for the transport to end the connection."""

    model_config = ConfigDict(frozen=True)

    mode: CloseMode
    reason: str
    code: int = 1000


class TransitionResult(BaseModel):
    """Outcome of feeding one event to the state machine."""

    session: AssessmentSession
    messages: list[OutboundMessage] = Field(default_factory=list)
    close: CloseDirective | None = None
    result: ReadinessResult | None = None

    @property
    def completed(self) -> bool:
        """True when this transition scored the assessment."""
        return self.result is not None


class AssessmentStateMachine:
    """
    Drives an assessment session through its states.

    States:
        UNSTARTED → IN_PROGRESS → COMPLETE
            ↓                        ↑
            └────────────────────────┘  (unknown persona)

    Events that are not valid in the current state are ignored rather
    than rejected, so duplicate or late client sends are harmless.
    """

    VALID_TRANSITIONS: dict[SessionState, list[SessionState]] = {
        SessionState.UNSTARTED: [SessionState.IN_PROGRESS, SessionState.COMPLETE],
        # IN_PROGRESS → IN_PROGRESS is a restart via a fresh start event
        SessionState.IN_PROGRESS: [SessionState.IN_PROGRESS, SessionState.COMPLETE],
        SessionState.COMPLETE: [],  # Terminal state
    }

    def __init__(
        self,
        question_bank: QuestionBank,
        questions_per_session: int = 5,
        expose_score_map: bool = True,
        point_min: int = 1,
        point_max: int = 4,
    ):
        """
        Initialize the state machine.

        Args:
            question_bank: Catalog to draw questions from
            questions_per_session: How many leading questions to ask
            expose_score_map: Include score maps in question messages
            point_min: Bottom of the score_map point scale
            point_max: Top of the score_map point scale
        """
        self.question_bank = question_bank
        self.questions_per_session = questions_per_session
        self.expose_score_map = expose_score_map
        self.point_min = point_min
        self.point_max = point_max

    def new_session(self) -> AssessmentSession:
        return AssessmentSession()

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def transition(
        self,
        session: AssessmentSession,
        event: InboundMessage | None,
    ) -> TransitionResult:
        """
        Apply one inbound event to a session.

        Args:
            session: Current session value
            event: Parsed inbound message (None for unknown types)

        Returns:
            TransitionResult with the next session and outbound messages
        """
        if session.state == SessionState.COMPLETE or event is None:
            return TransitionResult(session=session)

        if isinstance(event, StartMessage):
            return self._start(session, event)

        if isinstance(event, AnswerMessage):
            return self._answer(session, event)

        return TransitionResult(session=session)

    def _start(self, session: AssessmentSession, event: StartMessage) -> TransitionResult:
        # Looked up and echoed exactly as sent
        persona = event.persona

        if not persona:
            logger.info("Start rejected: no persona given")
            return TransitionResult(
                session=self._advance(session, SessionState.COMPLETE),
                messages=[ErrorMessage(message=MISSING_PERSONA_MESSAGE)],
                close=CloseDirective(mode=CloseMode.IMMEDIATE, reason="no-persona"),
            )

        questions = self.question_bank.questions_for(persona)[: self.questions_per_session]
        ack = AckMessage(persona=persona, total=len(questions))

        if not questions:
            logger.info(f"Start rejected: no questions for persona '{persona}'")
            return TransitionResult(
                session=self._advance(session, SessionState.COMPLETE, persona=persona),
                messages=[ack, ErrorMessage(message=NO_QUESTIONS_MESSAGE)],
                close=CloseDirective(mode=CloseMode.IMMEDIATE, reason="no-questions"),
            )

        if session.state == SessionState.IN_PROGRESS:
            logger.info(f"Restarting assessment with persona '{persona}'")

        started = self._advance(
            session,
            SessionState.IN_PROGRESS,
            persona=persona,
            selected_questions=questions,
            cursor=0,
            answers=(),
            external_assessment_id=event.assessment_id,
        )

        return TransitionResult(
            session=started,
            messages=[ack, self._question_message(started)],
        )

    def _answer(self, session: AssessmentSession, event: AnswerMessage) -> TransitionResult:
        if not session.accepts_answers():
            logger.debug(f"Ignoring answer in state {session.state.value}")
            return TransitionResult(session=session)

        question = session.get_current_question()
        record = AnswerRecord(
            question_id=question.id,
            raw_answer=event.answer,
            is_scoring=question.is_scoring,
        )
        cursor = session.cursor + 1
        answers = session.answers + (record,)

        if cursor < session.total:
            advanced = self._advance(
                session,
                SessionState.IN_PROGRESS,
                cursor=cursor,
                answers=answers,
            )
            return TransitionResult(
                session=advanced,
                messages=[self._question_message(advanced)],
            )

        completed = self._advance(
            session,
            SessionState.COMPLETE,
            cursor=cursor,
            answers=answers,
        )
        result = self.score(completed)

        return TransitionResult(
            session=completed,
            messages=[
                CompleteMessage(
                    assessment_id=completed.external_assessment_id,
                    score=result.score,
                    stage=result.stage.value,
                    answered=completed.answered,
                    total=completed.total,
                )
            ],
            close=CloseDirective(mode=CloseMode.AFTER_GRACE, reason="complete"),
            result=result,
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def score(self, session: AssessmentSession) -> ReadinessResult:
        """Score a session's recorded answers."""
        return compute_readiness(
            session.selected_questions,
            session.answers,
            point_min=self.point_min,
            point_max=self.point_max,
        )

    def _advance(
        self,
        session: AssessmentSession,
        new_state: SessionState,
        **changes,
    ) -> AssessmentSession:
        """
        Produce the next session value.

        Raises:
            StateTransitionError: If the state change is not allowed
        """
        valid_next_states = self.VALID_TRANSITIONS.get(session.state, [])
        if new_state not in valid_next_states:
            raise StateTransitionError(
                f"Invalid transition from {session.state} to {new_state}. "
                f"Valid transitions: {valid_next_states}"
            )

        if new_state != session.state:
            logger.debug(f"Assessment {session.state.value} → {new_state.value}")

        return session.model_copy(update={"state": new_state, **changes})

    def _question_message(self, session: AssessmentSession) -> QuestionMessage:
        question = session.get_current_question()
        return QuestionMessage(
            question=QuestionPayload.from_question(question, self.expose_score_map),
            index=session.cursor + 1,
            total=session.total,
        )
