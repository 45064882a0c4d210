"""
AI readiness assessment endpoints

Handles:
- Question preview for a persona
- The real-time assessment WebSocket
"""

from fastapi import APIRouter, HTTPException, WebSocket
from pydantic import BaseModel

from src.config.settings import get_settings
from src.core.protocol_handler import AssessmentProtocolHandler
from src.models.messages import QuestionPayload
from src.api.dependencies import (
    get_completion_listeners,
    get_question_bank,
    get_state_machine,
)

router = APIRouter()

# Mounted at the application root, outside the /api prefix
ws_router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class QuestionsResponse(BaseModel):
    """Questions a persona would be asked."""
    persona: str
    total: int
    questions: list[QuestionPayload]


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.get("/questions", response_model=QuestionsResponse, response_model_exclude_none=True)
async def get_questions(persona: str | None = None) -> QuestionsResponse:
    """
    Preview the questions for a persona.

    Returns the same leading questions a WebSocket session would ask.
    """
    bank = get_question_bank()

    if not persona or persona not in bank:
        raise HTTPException(status_code=400, detail="Invalid or missing persona")

    settings = get_settings()
    questions = bank.questions_for(persona)[: settings.questions_per_session]

    return QuestionsResponse(
        persona=persona,
        total=len(questions),
        questions=[
            QuestionPayload.from_question(q, settings.expose_score_map)
            for q in questions
        ],
    )


# ============================================================================
# WEBSOCKET ENDPOINT
# ============================================================================

@ws_router.websocket("/ws/ai-readiness")
async def websocket_assessment(websocket: WebSocket):
    """
    WebSocket endpoint for the readiness assessment.

    Message types:
    - start: Choose a persona (and optional assessmentId) and begin
    - answer: Answer the current question

    Server sends:
    - ack: Persona accepted, with question count
    - question: Next question to answer
    - complete: Final score and stage
    - error: Invalid message or unknown persona
    """
    settings = get_settings()

    handler = AssessmentProtocolHandler(
        websocket=websocket,
        state_machine=get_state_machine(),
        close_delay_seconds=settings.completion_close_delay_seconds,
        completion_listeners=get_completion_listeners(),
    )
    await handler.run()
