"""
Question models for the readiness assessment
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QuestionType(str, Enum):
    """How many options a respondent may pick."""

    SINGLE = "single"
    MULTI = "multi"


class Question(BaseModel):
    """A single catalog question, shared read-only across sessions."""

    model_config = ConfigDict(frozen=True)

    # Identification
    id: str = Field(..., min_length=1, description="Unique question ID")

    # Content
    text: str = Field(..., description="The question text")
    type: QuestionType = Field(
        default=QuestionType.SINGLE,
        description="Single or multi-select"
    )
    options: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Selectable options in display order"
    )

    # Scoring
    is_scoring: bool = Field(
        default=False,
        description="Whether the answer contributes to the readiness score"
    )
    score_map: dict[str, int] | None = Field(
        default=None,
        description="Option to points mapping (scoring questions only)"
    )

    @model_validator(mode="after")
    def _check_score_map(self) -> "Question":
        if self.is_scoring:
            if not self.score_map:
                raise ValueError(f"Scoring question '{self.id}' has no score map")
            if set(self.options) != set(self.score_map):
                raise ValueError(
                    f"Scoring question '{self.id}' options must match its score map keys"
                )
        elif self.score_map is not None:
            raise ValueError(f"Non-scoring question '{self.id}' must not carry a score map")
        return self

    def points_for(self, option: str) -> int | None:
        """Points awarded for an option, or None when it does not score."""
        if not self.score_map:
            return None
        return self.score_map.get(option)
