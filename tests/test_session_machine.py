"""Tests for the assessment state machine, driven without any transport."""

import pytest

from src.core.question_bank import QuestionBank
from src.core.session_machine import (
    AssessmentStateMachine,
    CloseMode,
    StateTransitionError,
)
from src.models.assessment import AssessmentSession, SessionState
from src.models.messages import AnswerMessage, StartMessage
from tests.helpers import context_question, make_source, scoring_question


def _run(machine, events, session=None):
    """Feed events in order; return final session and all outbound wire messages."""
    session = session or machine.new_session()
    sent = []
    results = []
    for event in events:
        result = machine.transition(session, event)
        session = result.session
        sent.extend(m.to_wire() for m in result.messages)
        results.append(result)
    return session, sent, results


def _start(persona, assessment_id=None):
    return StartMessage(persona=persona, assessment_id=assessment_id)


def _answer(value):
    return AnswerMessage(answer=value)


# =============================================================================
# Start
# =============================================================================


class TestStart:
    def test_selects_first_five_questions(self, machine, bank):
        session, sent, _ = _run(machine, [_start("practitioner")])

        assert session.state == SessionState.IN_PROGRESS
        assert session.total == 5
        assert session.selected_questions == bank.questions_for("practitioner")[:5]
        assert session.cursor == 0
        assert session.answers == ()

    @pytest.mark.parametrize("persona", ["c_suite", "manager", "practitioner"])
    def test_scoring_questions_before_non_scoring(self, machine, persona):
        session, _, _ = _run(machine, [_start(persona)])
        flags = [q.is_scoring for q in session.selected_questions]
        assert len(flags) == 5
        assert flags == sorted(flags, reverse=True)

    def test_emits_ack_then_first_question(self, machine):
        _, sent, _ = _run(machine, [_start("manager")])

        assert sent[0] == {"type": "ack", "persona": "manager", "total": 5}
        assert sent[1]["type"] == "question"
        assert sent[1]["index"] == 1
        assert sent[1]["total"] == 5
        assert sent[1]["question"]["id"] == "mg_adoption"
        assert sent[1]["question"]["scoring"] is True
        assert sent[1]["question"]["score_map"]["Not at all"] == 1
        assert len(sent) == 2

    def test_score_map_can_be_hidden(self, bank):
        machine = AssessmentStateMachine(bank, expose_score_map=False)
        _, sent, _ = _run(machine, [_start("manager")])
        assert "score_map" not in sent[1]["question"]

    def test_non_scoring_question_has_no_score_map(self, machine):
        events = [_start("manager")] + [_answer("x")] * 3
        _, sent, _ = _run(machine, events)
        fourth = sent[-1]
        assert fourth["index"] == 4
        assert fourth["question"]["scoring"] is False
        assert "score_map" not in fourth["question"]

    def test_records_assessment_id(self, machine):
        session, _, _ = _run(machine, [_start("manager", "abc-123")])
        assert session.external_assessment_id == "abc-123"

    def test_unknown_persona(self, machine):
        session, sent, results = _run(machine, [_start("astronaut")])

        assert sent == [
            {"type": "ack", "persona": "astronaut", "total": 0},
            {"type": "error", "message": "No questions found for persona."},
        ]
        assert session.state == SessionState.COMPLETE
        assert results[0].close.mode == CloseMode.IMMEDIATE
        assert results[0].close.reason == "no-questions"
        assert results[0].result is None

    def test_missing_persona(self, machine):
        session, sent, results = _run(machine, [StartMessage()])

        assert sent == [{"type": "error", "message": "Missing persona."}]
        assert session.state == SessionState.COMPLETE
        assert results[0].close.mode == CloseMode.IMMEDIATE

    def test_empty_persona_is_missing(self, machine):
        session, sent, results = _run(machine, [_start("")])

        assert sent == [{"type": "error", "message": "Missing persona."}]
        assert session.state == SessionState.COMPLETE
        assert results[0].close.reason == "no-persona"

    def test_persona_key_is_not_trimmed(self, machine):
        session, sent, results = _run(machine, [_start(" manager ")])

        assert sent == [
            {"type": "ack", "persona": " manager ", "total": 0},
            {"type": "error", "message": "No questions found for persona."},
        ]
        assert session.state == SessionState.COMPLETE
        assert session.persona == " manager "
        assert results[0].close.reason == "no-questions"

    def test_restart_while_in_progress(self, machine):
        session, sent, _ = _run(
            machine,
            [_start("manager"), _answer("Not at all"), _start("practitioner", "second")],
        )

        assert session.persona == "practitioner"
        assert session.cursor == 0
        assert session.answers == ()
        assert session.external_assessment_id == "second"
        assert sent[-2] == {"type": "ack", "persona": "practitioner", "total": 5}

    def test_short_persona_uses_all_questions(self):
        bank = QuestionBank.from_source(
            make_source(scoring=[scoring_question("s1", [1, 4])], non_scoring=[context_question("n1")])
        )
        machine = AssessmentStateMachine(bank)
        session, sent, _ = _run(machine, [_start("tester")])
        assert session.total == 2
        assert sent[0]["total"] == 2


# =============================================================================
# Answers
# =============================================================================


class TestAnswers:
    def test_ignored_before_start(self, machine):
        session = machine.new_session()
        result = machine.transition(session, _answer("anything"))

        assert result.session == session
        assert result.messages == []
        assert result.close is None

    def test_unknown_event_ignored(self, machine):
        session = machine.new_session()
        result = machine.transition(session, None)
        assert result.session == session
        assert result.messages == []

    def test_records_answer_and_advances(self, machine):
        session, sent, _ = _run(machine, [_start("practitioner"), _answer("Weekly")])

        assert session.cursor == 1
        assert session.answers[0].question_id == "pr_usage"
        assert session.answers[0].raw_answer == "Weekly"
        assert session.answers[0].is_scoring is True
        assert sent[-1]["index"] == 2
        assert sent[-1]["question"]["id"] == "pr_confidence"

    def test_transitions_do_not_mutate_input(self, machine):
        started = machine.transition(machine.new_session(), _start("practitioner")).session
        machine.transition(started, _answer("Weekly"))
        assert started.cursor == 0
        assert started.answers == ()

    def test_practitioner_completion(self, machine):
        events = [
            _start("practitioner", "assess-42"),
            _answer("Daily, as part of my workflow"),  # 4
            _answer("Confident for routine tasks"),  # 3
            _answer("Possible with manual effort"),  # 2
            _answer(["Chat assistants", "Coding assistants"]),
            _answer("Mentoring"),
        ]
        session, sent, results = _run(machine, events)

        assert session.state == SessionState.COMPLETE
        assert sent[-1] == {
            "type": "complete",
            "assessment_id": "assess-42",
            "score": 56.7,
            "stage": "Developing",
            "answered": 5,
            "total": 5,
        }
        assert results[-1].close.mode == CloseMode.AFTER_GRACE
        assert results[-1].close.reason == "complete"
        assert results[-1].completed

    def test_complete_without_assessment_id(self, machine):
        events = [_start("manager")] + [_answer("x")] * 5
        _, sent, _ = _run(machine, events)
        assert sent[-1]["assessment_id"] is None
        assert sent[-1]["score"] == 0.0
        assert sent[-1]["stage"] == "Early-Stage AI"

    def test_answers_after_completion_are_ignored(self, machine):
        events = [_start("manager")] + [_answer("x")] * 5
        session, sent, _ = _run(machine, events)
        completes = len([m for m in sent if m["type"] == "complete"])

        session, more, _ = _run(machine, [_answer("x"), _start("manager")], session=session)

        assert more == []
        assert completes == 1
        assert session.answered == 5

    def test_top_answers_single_question(self):
        bank = QuestionBank.from_source(
            make_source(scoring=[scoring_question("s1", [4, 4, 4])])
        )
        machine = AssessmentStateMachine(bank)
        for option in ("s1_0", "s1_1", "s1_2"):
            _, sent, _ = _run(machine, [_start("tester"), _answer(option)])
            assert sent[-1]["score"] == 85.0
            assert sent[-1]["stage"] == "AI-Mature"

    def test_bottom_answers_single_question(self):
        bank = QuestionBank.from_source(
            make_source(scoring=[scoring_question("s1", [1, 1])])
        )
        machine = AssessmentStateMachine(bank)
        _, sent, _ = _run(machine, [_start("tester"), _answer("s1_1")])
        assert sent[-1]["score"] == 0.0

    def test_multi_select_matches_single(self):
        bank = QuestionBank.from_source(
            make_source(scoring=[scoring_question("s1", [1, 2, 3], qtype="multi")])
        )
        machine = AssessmentStateMachine(bank)
        _, multi, _ = _run(machine, [_start("tester"), _answer(["s1_1", "s1_2"])])
        _, single, _ = _run(machine, [_start("tester"), _answer("s1_1")])
        assert multi[-1]["score"] == single[-1]["score"]

    def test_answered_never_exceeds_total(self, machine):
        events = [_start("c_suite")] + [_answer("x")] * 9
        session, sent, _ = _run(machine, events)
        complete = [m for m in sent if m["type"] == "complete"]
        assert len(complete) == 1
        assert complete[0]["answered"] <= complete[0]["total"]


# =============================================================================
# Transition table
# =============================================================================


class TestTransitionTable:
    def test_complete_is_terminal(self, machine):
        session = AssessmentSession(state=SessionState.COMPLETE)
        with pytest.raises(StateTransitionError):
            machine._advance(session, SessionState.IN_PROGRESS)

    def test_cannot_return_to_unstarted(self, machine):
        session = AssessmentSession(state=SessionState.IN_PROGRESS)
        with pytest.raises(StateTransitionError):
            machine._advance(session, SessionState.UNSTARTED)
