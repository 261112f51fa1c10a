"""Tests for the QuestionBank module."""
import json
import pytest
from practice_exam.errors import InvalidCorpus
from practice_exam.question_bank import Question, QuestionBank, load_corpus_file
from practice_exam.sampler import AllQuestions, ByPaper, BySubject


SAMPLE_RECORDS = [
    {
        "id": "q1",
        "question": "What does a call option give its buyer?",
        "options": ["The right to buy", "The right to sell"],
        "answer": "The right to buy",
        "category": "Options",
        "subCategory": "Paper 1",
        "explanation": "A call is a right, not an obligation, to buy.",
    },
    {
        "id": "q2",
        "question": "What is basis?",
        "options": ["Spot minus futures", "Premium", "Margin"],
        "answer": "Spot minus futures",
        "category": "Futures",
        "subCategory": "Paper 2",
    },
    {
        "id": "q3",
        "question": "Who pays the option premium?",
        "options": ["Writer", "Buyer"],
        "answer": "Buyer",
        "category": "Options",
    },
]


@pytest.fixture
def bank():
    b = QuestionBank()
    b.load(SAMPLE_RECORDS)
    return b


def by_id(bank, qid):
    return next((q for q in bank.questions if q.id == qid), None)


def test_load_questions(bank):
    assert len(bank) == 3
    q = by_id(bank, "q1")
    assert q.text == "What does a call option give its buyer?"
    assert q.options == ("The right to buy", "The right to sell")
    assert q.correct_option == "The right to buy"
    assert q.sub_category == "Paper 1"


def test_missing_category_defaults_to_general():
    b = QuestionBank()
    b.load([{"id": 1, "question": "Q?", "options": ["a", "b"], "answer": "a"}])
    q = by_id(b, "1")
    assert q.category == "General"
    assert q.sub_category is None
    assert q.explanation is None


def test_answer_not_in_options_rejected():
    with pytest.raises(InvalidCorpus):
        Question.from_dict({"id": "x", "question": "Q?", "options": ["a"], "answer": "b"})


def test_empty_options_rejected():
    with pytest.raises(InvalidCorpus):
        Question.from_dict({"id": "x", "question": "Q?", "options": [], "answer": "a"})


@pytest.mark.parametrize("bad", [[], {"id": "q1"}, "questions", None, 42])
def test_non_sequence_or_empty_input_rejected(bad):
    with pytest.raises(InvalidCorpus):
        QuestionBank().load(bad)


def test_failed_load_leaves_bank_untouched(bank):
    broken = SAMPLE_RECORDS + [{"id": "q4", "question": "Q?", "options": ["a"], "answer": "z"}]
    with pytest.raises(InvalidCorpus):
        bank.load(broken)
    assert len(bank) == 3
    assert by_id(bank, "q4") is None


@pytest.mark.parametrize("key,value", [
    ("category", ["Options"]),
    ("subCategory", {"paper": 1}),
    ("explanation", 42),
])
def test_non_text_grouping_fields_rejected(bank, key, value):
    malformed = dict(SAMPLE_RECORDS[0], id="q9", **{key: value})
    with pytest.raises(InvalidCorpus):
        bank.load([SAMPLE_RECORDS[1], malformed])
    assert len(bank) == 3
    assert bank.subjects() == ["Options", "Futures"]


def test_question_with_non_text_category_rejected():
    with pytest.raises(InvalidCorpus):
        Question(id="x", text="Q?", options=("a",), correct_option="a", category=["Options"])


def test_duplicate_ids_rejected(bank):
    with pytest.raises(InvalidCorpus):
        bank.load([SAMPLE_RECORDS[0], SAMPLE_RECORDS[0]])
    assert len(bank) == 3


def test_load_replaces_whole_bank(bank):
    bank.load([SAMPLE_RECORDS[1]])
    assert len(bank) == 1
    assert by_id(bank, "q1") is None


def test_subjects_and_papers(bank):
    assert bank.subjects() == ["Options", "Futures"]
    assert bank.papers() == ["Paper 1", "Paper 2"]


def test_max_questions(bank):
    assert bank.max_questions(AllQuestions(count=1)) == 3
    assert bank.max_questions(BySubject(count=1, subject="Options")) == 2
    assert bank.max_questions(ByPaper(count=1, paper="Paper 2")) == 1


def test_load_corpus_file(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps(SAMPLE_RECORDS))
    records = load_corpus_file(str(path))
    assert len(records) == 3


def test_load_corpus_file_bad_json(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text("{not json")
    with pytest.raises(InvalidCorpus):
        load_corpus_file(str(path))


def test_load_corpus_file_not_an_array(tmp_path):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps({"questions": SAMPLE_RECORDS}))
    with pytest.raises(InvalidCorpus):
        load_corpus_file(str(path))


def test_load_corpus_file_missing(tmp_path):
    with pytest.raises(InvalidCorpus):
        load_corpus_file(str(tmp_path / "nope.json"))
