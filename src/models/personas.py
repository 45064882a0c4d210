"""
Persona definitions for the readiness assessment

A persona selects which questionnaire variant a respondent receives.
"""

from enum import Enum


class Persona(str, Enum):
    """Role-based questionnaire variants."""

    C_SUITE = "c_suite"
    MANAGER = "manager"
    PRACTITIONER = "practitioner"

    @property
    def display_name(self) -> str:
        """Human-readable persona name."""
        names = {
            "c_suite": "C-Suite / Decision Maker",
            "manager": "Manager / Functional Head",
            "practitioner": "Practitioner / Contributor / Analyst",
        }
        return names.get(self.value, self.value)


def persona_label(key: str) -> str:
    """Display label for a catalog key, falling back to the key itself."""
    try:
        return Persona(key).display_name
    except ValueError:
        return key
