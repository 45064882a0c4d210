"""
Metadata API endpoints

Provides reference data for:
- Personas
- Readiness stages
"""

from fastapi import APIRouter
from pydantic import BaseModel

from src.core.scoring import STAGE_THRESHOLDS
from src.models.personas import persona_label
from src.models.readiness import ReadinessStage
from src.api.dependencies import get_question_bank

router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class PersonaInfo(BaseModel):
    """Information about a persona."""
    id: str
    name: str
    question_count: int
    scoring_count: int


class StageInfo(BaseModel):
    """A readiness stage and the score range it covers."""
    id: str
    name: str
    min_score: float
    max_score: float


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/personas")
async def get_personas() -> list[PersonaInfo]:
    """Get all personas available in the question catalog."""
    bank = get_question_bank()
    personas = []

    for key in bank.personas():
        questions = bank.questions_for(key)
        personas.append(PersonaInfo(
            id=key,
            name=persona_label(key),
            question_count=len(questions),
            scoring_count=len([q for q in questions if q.is_scoring]),
        ))

    return personas


@router.get("/stages")
async def get_stages() -> list[StageInfo]:
    """Get readiness stages in ascending order."""
    stages = []
    lower = 0.0

    for upper, stage in STAGE_THRESHOLDS:
        stages.append(StageInfo(
            id=stage.name.lower(),
            name=stage.value,
            min_score=lower,
            max_score=float(upper),
        ))
        lower = float(upper)

    stages.append(StageInfo(
        id=ReadinessStage.AI_MATURE.name.lower(),
        name=ReadinessStage.AI_MATURE.value,
        min_score=lower,
        max_score=100.0,
    ))

    return stages
