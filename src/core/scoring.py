"""
Scoring Engine for the readiness assessment

Maps a completed answer set to a normalized 0-100 readiness score and a
maturity stage. Pure and deterministic; no I/O.
"""

from typing import Iterable, Sequence

from src.models.assessment import AnswerRecord
from src.models.question import Question
from src.models.readiness import ReadinessResult, ReadinessStage


# Normalized score reached when every answer earns the top of the scale
SCALE_CEILING = 85

# Inclusive upper bounds per stage, checked in order
STAGE_THRESHOLDS: list[tuple[float, ReadinessStage]] = [
    (40, ReadinessStage.EARLY_STAGE),
    (60, ReadinessStage.DEVELOPING),
    (75, ReadinessStage.TRANSFORMING),
]


def stage_from_score(score: float) -> ReadinessStage:
    """Bucket a normalized score into a maturity stage."""
    for upper_bound, stage in STAGE_THRESHOLDS:
        if score <= upper_bound:
            return stage
    return ReadinessStage.AI_MATURE


def answer_key(raw_answer: str | Sequence[str] | None) -> str | None:
    """
    Option used to look up points for a recorded answer.

    Multi-select answers score on their first selection only.
    """
    if raw_answer is None:
        return None
    if isinstance(raw_answer, str):
        return raw_answer or None
    if not raw_answer:
        return None
    first = raw_answer[0]
    return first if isinstance(first, str) and first else None


def normalize(raw: float, point_min: int = 1, point_max: int = 4) -> float:
    """Rescale a mean point value onto 0-100, rounded to 1 decimal."""
    scaled = ((raw - point_min) / (point_max - point_min)) * SCALE_CEILING
    return round(max(0.0, min(100.0, scaled)), 1)


def compute_readiness(
    questions: Iterable[Question],
    answers: Iterable[AnswerRecord],
    point_min: int = 1,
    point_max: int = 4,
) -> ReadinessResult:
    """
    Compute the readiness result for a session.

    Args:
        questions: Questions selected for the session
        answers: Recorded answers, in the order given
        point_min: Bottom of the score_map point scale
        point_max: Top of the score_map point scale

    Returns:
        ReadinessResult with score and stage
    """
    scoring_questions = [q for q in questions if q.is_scoring]

    by_question: dict[str, AnswerRecord] = {}
    for record in answers:
        # First answer for a question wins
        by_question.setdefault(record.question_id, record)

    total = 0
    for question in scoring_questions:
        record = by_question.get(question.id)
        if record is None:
            continue

        key = answer_key(record.raw_answer)
        if key is None:
            continue

        points = question.points_for(key)
        if isinstance(points, (int, float)) and not isinstance(points, bool):
            total += points

    raw = total / len(scoring_questions) if scoring_questions else 0
    score = normalize(raw, point_min, point_max)

    return ReadinessResult(score=score, stage=stage_from_score(score))
