"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from src.config.settings import DEFAULT_QUESTION_BANK
from src.core.question_bank import QuestionBank
from src.core.session_machine import AssessmentStateMachine


@pytest.fixture(scope="session")
def bank() -> QuestionBank:
    """The bundled question catalog."""
    return QuestionBank.load(DEFAULT_QUESTION_BANK)


@pytest.fixture
def machine(bank) -> AssessmentStateMachine:
    return AssessmentStateMachine(bank)


@pytest.fixture
def client():
    """Test client with the application lifespan running."""
    from main import app

    with TestClient(app) as test_client:
        yield test_client
