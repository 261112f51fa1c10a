"""Tests for the ExamRunner module."""
import random
import pytest
from unittest.mock import MagicMock
from practice_exam.exam_runner import ExamRunner
from practice_exam.feedback_generator import FeedbackGenerator
from practice_exam.question_bank import QuestionBank
from practice_exam.sampler import AllQuestions, BySubject
from practice_exam.session import SessionState, SessionStatus


SAMPLE_RECORDS = [
    {
        "id": f"q{i}",
        "question": f"Question {i}?",
        "options": ["right", "wrong"],
        "answer": "right",
        "category": "Options",
    }
    for i in range(3)
]


class NullTimer:
    def __init__(self, callback, clock=None):
        self.callback = callback

    def arm(self, deadline):
        pass

    def cancel(self):
        pass


@pytest.fixture
def session():
    bank = QuestionBank()
    bank.load(SAMPLE_RECORDS)
    return SessionState(bank, timer_factory=NullTimer, rng=random.Random(3))


def make_runner(session, inputs, llm=None):
    output = []
    runner = ExamRunner(
        session,
        FeedbackGenerator(llm_core=llm),
        input_func=MagicMock(side_effect=list(inputs)),
        output_func=output.append,
    )
    return runner, output


# --- Tests for parse_command ---

@pytest.mark.parametrize("text,expected", [
    ("2", ("answer", 2)),
    ("goto 3", ("goto", 3)),
    ("g 1", ("goto", 1)),
    ("check", ("reveal", None)),
    ("Next", ("next", None)),
    ("prev.", ("prev", None)),
    ("SUBMIT", ("submit", None)),
    ("quit!", ("quit", None)),
    ("time", ("time", None)),
    ("palette", ("palette", None)),
    ("", (None, None)),
    ("what?", (None, None)),
])
def test_parse_command(session, text, expected):
    runner, _ = make_runner(session, [])
    assert runner.parse_command(text) == expected


# --- Tests for run_exam ---

def test_answer_then_submit(session):
    runner, output = make_runner(session, ["1", "next", "2", "submit"])
    report = runner.run_exam(AllQuestions(count=3))
    assert session.status == SessionStatus.COMPLETED
    assert report.correct_count == 1
    assert report.incorrect_count == 1
    assert report.score == pytest.approx(0.75)
    assert any("Score (with negative marking)" in line for line in output)


def test_answers_are_final(session):
    runner, output = make_runner(session, ["2", "1", "submit"])
    report = runner.run_exam(AllQuestions(count=3))
    assert report.answered_questions[0].user_answer == "wrong"
    assert "This question is already answered; answers are final." in output


def test_reveal_requires_answer(session):
    runner, output = make_runner(session, ["check", "1", "check", "submit"])
    runner.run_exam(AllQuestions(count=3))
    assert "Answer the question before checking it." in output
    assert session.questions[0].revealed is True


def test_out_of_range_option(session):
    runner, output = make_runner(session, ["7", "submit"])
    runner.run_exam(AllQuestions(count=3))
    assert "Choose an option between 1 and 2." in output


def test_goto_out_of_range_keeps_position(session):
    runner, _ = make_runner(session, ["goto 2", "goto 99", "submit"])
    runner.run_exam(AllQuestions(count=3))
    assert session.current_index == 1


def test_quit_abandons_session(session):
    runner, output = make_runner(session, ["quit"])
    assert runner.run_exam(AllQuestions(count=3)) is None
    assert session.status == SessionStatus.IDLE


def test_eof_quits(session):
    runner, _ = make_runner(session, [EOFError()])
    assert runner.run_exam(AllQuestions(count=3)) is None


def test_no_questions_message(session):
    runner, output = make_runner(session, [])
    assert runner.run_exam(BySubject(count=3, subject="Futures")) is None
    assert any("No questions match" in line for line in output)


def test_timeout_while_waiting_for_input(session):
    def expire(prompt):
        session.submit()
        return "1"

    runner = ExamRunner(session, FeedbackGenerator(), input_func=expire, output_func=lambda s: None)
    report = runner.run_exam(AllQuestions(count=3))
    assert report is session.result
    assert report.correct_count == 0


def test_palette(session):
    runner, _ = make_runner(session, [])
    session.start(AllQuestions(count=3))
    session.select_answer(session.questions[0].id, "right")
    session.reveal(session.questions[0].id)
    session.select_answer(session.questions[1].id, "right")
    session.navigate(2)
    assert runner.render_palette() == "1+ 2* 3[.]"


# --- Tests for review ---

def test_review_study_plan_and_explain(session):
    llm = MagicMock()
    llm.generate_text.return_value = "AI says hi"
    runner, output = make_runner(session, ["2", "submit", "s", "e1", "e9", "d"], llm=llm)
    report = runner.run(AllQuestions(count=3))
    assert report is not None
    assert output.count("AI says hi") == 2
    assert "Pick a question between 1 and 3." in output
    assert session.status == SessionStatus.IDLE


def test_review_skips_correct_answers(session):
    llm = MagicMock()
    runner, output = make_runner(session, ["1", "submit", "explain 1", "done"], llm=llm)
    runner.run(AllQuestions(count=3))
    assert "You answered this one correctly." in output
    llm.generate_text.assert_not_called()


def test_available_count_announced(session):
    runner, output = make_runner(session, ["submit"])
    runner.run_exam(AllQuestions(count=5))
    assert "Available questions for this selection: 3" in output
    assert "Only 3 questions match; the test will use all of them." in output


def test_available_count_without_shortfall(session):
    runner, output = make_runner(session, ["submit"])
    runner.run_exam(AllQuestions(count=2))
    assert "Available questions for this selection: 3" in output
    assert not any(line.startswith("Only ") for line in output)


def test_submit_reports_answered_count(session):
    runner, output = make_runner(session, ["1", "submit"])
    runner.run_exam(AllQuestions(count=3))
    assert "You answered 1 of 3 questions." in output
