"""
API Dependencies

Provides dependency injection for API endpoints.
Manages singleton instances of core components.
"""

from src.config.settings import get_settings
from src.core.question_bank import QuestionBank
from src.core.session_machine import AssessmentStateMachine
from src.core.protocol_handler import CompletionListener


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_question_bank: QuestionBank | None = None
_state_machine: AssessmentStateMachine | None = None
_completion_listeners: list[CompletionListener] = []


def get_question_bank() -> QuestionBank:
    """
    Get the question bank singleton.

    Loaded once from the configured catalog source; read-only afterwards.
    """
    global _question_bank

    if _question_bank is None:
        settings = get_settings()
        _question_bank = QuestionBank.load(
            settings.question_bank_file,
            point_min=settings.score_point_min,
            point_max=settings.score_point_max,
        )

    return _question_bank


def get_state_machine() -> AssessmentStateMachine:
    """Get the assessment state machine singleton."""
    global _state_machine

    if _state_machine is None:
        settings = get_settings()
        _state_machine = AssessmentStateMachine(
            question_bank=get_question_bank(),
            questions_per_session=settings.questions_per_session,
            expose_score_map=settings.expose_score_map,
            point_min=settings.score_point_min,
            point_max=settings.score_point_max,
        )

    return _state_machine


def get_completion_listeners() -> list[CompletionListener]:
    """Listeners notified when an assessment completes."""
    return list(_completion_listeners)


def register_completion_listener(listener: CompletionListener) -> None:
    """Register a downstream consumer of completed assessments."""
    _completion_listeners.append(listener)


async def cleanup():
    """Cleanup resources on shutdown."""
    global _question_bank, _state_machine

    _state_machine = None
    _question_bank = None
    _completion_listeners.clear()
