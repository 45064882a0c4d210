"""
Question Bank for the readiness assessment

Loads the static per-persona catalog once at startup and serves
read-only question lists to every session.
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import ValidationError

from src.models.question import Question, QuestionType

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when the question catalog source is malformed."""
    pass


class QuestionBank:
    """
    Immutable persona catalog.

    Each persona maps to its scoring questions (source order) followed by
    its non-scoring questions (source order).
    """

    def __init__(self, catalog: Mapping[str, tuple[Question, ...]]):
        self._catalog: Mapping[str, tuple[Question, ...]] = MappingProxyType(
            {persona: tuple(questions) for persona, questions in catalog.items()}
        )

    # =========================================================================
    # LOADING
    # =========================================================================

    @classmethod
    def load(
        cls,
        path: str | Path,
        point_min: int = 1,
        point_max: int = 4,
    ) -> "QuestionBank":
        """
        Load and validate the catalog from a JSON file.

        Args:
            path: Catalog source file
            point_min: Lowest allowed score_map value
            point_max: Highest allowed score_map value

        Raises:
            CatalogError: If the file is missing, unparsable, or violates
                a catalog invariant
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise CatalogError(f"Cannot read question catalog {path}: {e}") from e
        except ValueError as e:
            raise CatalogError(f"Question catalog {path} is not valid JSON: {e}") from e

        bank = cls.from_source(data, point_min=point_min, point_max=point_max)
        logger.info(
            f"Loaded question catalog from {path}: "
            + ", ".join(f"{p}={len(bank.questions_for(p))}" for p in bank.personas())
        )
        return bank

    @classmethod
    def from_source(
        cls,
        data: Any,
        point_min: int = 1,
        point_max: int = 4,
    ) -> "QuestionBank":
        """Build a bank from already-parsed catalog data."""
        if point_min >= point_max:
            raise CatalogError(
                f"Invalid point scale: min {point_min} must be below max {point_max}"
            )
        if not isinstance(data, dict):
            raise CatalogError("Question catalog must be a JSON object keyed by persona")

        catalog: dict[str, tuple[Question, ...]] = {}

        for persona, section in data.items():
            if not isinstance(section, dict):
                raise CatalogError(f"Persona '{persona}' must map to an object")

            # Ids only need to be unique within one persona
            seen_ids: set[str] = set()

            scoring = [
                _build_question(persona, raw, scoring=True)
                for raw in section.get("scoring") or []
            ]
            non_scoring = [
                _build_question(persona, raw, scoring=False)
                for raw in section.get("non_scoring") or []
            ]

            for question in scoring:
                for option, points in question.score_map.items():
                    if not point_min <= points <= point_max:
                        raise CatalogError(
                            f"Question '{question.id}' option '{option}' scores {points}, "
                            f"outside the {point_min}-{point_max} point scale"
                        )

            for question in scoring + non_scoring:
                if question.id in seen_ids:
                    raise CatalogError(
                        f"Duplicate question id '{question.id}' in persona '{persona}'"
                    )
                seen_ids.add(question.id)

            catalog[persona] = tuple(scoring + non_scoring)

        return cls(catalog)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def questions_for(self, persona: str | None) -> tuple[Question, ...]:
        """
        Get the ordered questions for a persona.

        Unknown personas yield an empty tuple; callers treat that as
        "no such persona".
        """
        if not persona:
            return ()
        return self._catalog.get(persona, ())

    def personas(self) -> list[str]:
        """Catalog persona keys in source order."""
        return list(self._catalog)

    def __contains__(self, persona: object) -> bool:
        return persona in self._catalog


def _build_question(persona: str, raw: Any, scoring: bool) -> Question:
    """Map a catalog source entry to a Question."""
    if not isinstance(raw, dict):
        raise CatalogError(f"Persona '{persona}' has a question that is not an object")

    options = raw.get("options")
    try:
        if scoring:
            if not isinstance(options, dict) or not options:
                raise CatalogError(
                    f"Scoring question '{raw.get('id')}' needs a non-empty option to points map"
                )
            return Question(
                id=raw.get("id"),
                text=raw.get("question"),
                type=raw.get("type") or QuestionType.SINGLE,
                options=tuple(options),
                is_scoring=True,
                score_map=options,
            )

        return Question(
            id=raw.get("id"),
            text=raw.get("question"),
            type=raw.get("type") or QuestionType.SINGLE,
            options=tuple(options) if isinstance(options, list) else (),
            is_scoring=False,
        )
    except ValidationError as e:
        raise CatalogError(f"Invalid question in persona '{persona}': {e}") from e
