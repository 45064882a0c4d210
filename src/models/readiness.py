"""
Readiness result models

Defines the maturity stages and the score produced for a finished assessment.
"""

from enum import Enum

from pydantic import BaseModel, Field


class ReadinessStage(str, Enum):
    """Maturity stage bucketed from the normalized score."""

    EARLY_STAGE = "Early-Stage AI"      # 0-40
    DEVELOPING = "Developing"           # 40-60
    TRANSFORMING = "Transforming"       # 60-75
    AI_MATURE = "AI-Mature"             # 75-100


class ReadinessResult(BaseModel):
    """Score and stage for a completed assessment."""

    score: float = Field(..., ge=0, le=100, description="Normalized score, 1 decimal")
    stage: ReadinessStage
