"""Question Bank: Loads and holds the imported question corpus."""

import json
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import InvalidCorpus

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"


@dataclass(frozen=True)
class Question:
    """A single multiple-choice question from the corpus."""

    id: str
    text: str
    options: Tuple[str, ...]
    correct_option: str
    category: str = DEFAULT_CATEGORY
    sub_category: Optional[str] = None
    explanation: Optional[str] = None

    def __post_init__(self):
        if not self.options:
            raise InvalidCorpus(f"Question {self.id!r} has no options")
        if self.correct_option not in self.options:
            raise InvalidCorpus(
                f"Question {self.id!r}: answer {self.correct_option!r} is not one of its options"
            )
        if not isinstance(self.category, str) or not isinstance(self.sub_category, (str, type(None))):
            raise InvalidCorpus(f"Question {self.id!r} has a non-text category")

    @classmethod
    def from_dict(cls, record: dict) -> "Question":
        """Build a Question from a corpus record (``question``/``answer``/``subCategory`` keys)."""
        if not isinstance(record, dict):
            raise InvalidCorpus(f"Expected a question object, got {type(record).__name__}")

        qid = record.get("id")
        text = record.get("question")
        options = record.get("options")
        answer = record.get("answer")

        if qid is None or str(qid).strip() == "":
            raise InvalidCorpus("Question record is missing an id")
        if not isinstance(text, str) or not text.strip():
            raise InvalidCorpus(f"Question {qid!r} is missing its text")
        if not isinstance(options, list) or not options:
            raise InvalidCorpus(f"Question {qid!r} must have a non-empty options list")
        if not all(isinstance(o, str) for o in options):
            raise InvalidCorpus(f"Question {qid!r} has non-text options")
        if not isinstance(answer, str):
            raise InvalidCorpus(f"Question {qid!r} is missing its answer")
        for key in ("category", "subCategory", "explanation"):
            if record.get(key) is not None and not isinstance(record[key], str):
                raise InvalidCorpus(f"Question {qid!r}: {key} must be text")

        return cls(
            id=str(qid),
            text=text,
            options=tuple(options),
            correct_option=answer,
            category=record.get("category") or DEFAULT_CATEGORY,
            sub_category=record.get("subCategory") or None,
            explanation=record.get("explanation") or None,
        )


def load_corpus_file(path: str) -> list:
    """Read a JSON question file and return its list of records."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise InvalidCorpus(f"Could not read question file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidCorpus(f"Error parsing JSON file {path}: {e}") from e

    if not isinstance(data, list) or not data:
        raise InvalidCorpus("Invalid JSON format. Expected an array of questions.")
    return data


class QuestionBank:
    """In-memory registry of every question available for sampling."""

    def __init__(self):
        self._questions: Tuple[Question, ...] = ()

    def load(self, records: Sequence) -> None:
        """Replace the whole bank. Either every record is valid or nothing changes."""
        if isinstance(records, (str, bytes, dict)) or not isinstance(records, Sequence):
            raise InvalidCorpus("Expected a sequence of question records")
        if not records:
            raise InvalidCorpus("Question corpus is empty")

        questions: List[Question] = []
        by_id: Dict[str, Question] = {}
        for i, record in enumerate(records):
            question = record if isinstance(record, Question) else Question.from_dict(record)
            if question.id in by_id:
                raise InvalidCorpus(f"Duplicate question id {question.id!r} at position {i}")
            by_id[question.id] = question
            questions.append(question)

        self._questions = tuple(questions)
        logger.info(f"Question bank loaded with {len(questions)} questions")

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    def __len__(self) -> int:
        return len(self._questions)

    def subjects(self) -> List[str]:
        """Distinct categories in the order they first appear."""
        return list(dict.fromkeys(q.category for q in self._questions))

    def papers(self) -> List[str]:
        """Distinct sub-categories in the order they first appear."""
        return list(dict.fromkeys(q.sub_category for q in self._questions if q.sub_category))

    def max_questions(self, config) -> int:
        """How many questions the given selection could draw from."""
        return sum(1 for q in self._questions if config.matches(q))
