"""Sampler: Selection configs and randomized question sampling."""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from .question_bank import Question

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionConfig:
    """Base for the three selection kinds; ``count`` is the requested sample size."""

    count: int

    def __post_init__(self):
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 1:
            raise ValueError(f"count must be a positive integer, got {self.count!r}")

    def matches(self, question: Question) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class AllQuestions(SelectionConfig):
    """Random mix across every subject."""

    def matches(self, question: Question) -> bool:
        return True


@dataclass(frozen=True)
class BySubject(SelectionConfig):
    subject: str = ""

    def matches(self, question: Question) -> bool:
        return question.category == self.subject


@dataclass(frozen=True)
class ByPaper(SelectionConfig):
    paper: str = ""

    def matches(self, question: Question) -> bool:
        return question.sub_category == self.paper


def selection_from_dict(data: dict) -> SelectionConfig:
    """Build a selection from ``{"type": "all"|"subject"|"paper", "value": ..., "count": n}``."""
    kind = (data.get("type") or "all").lower()
    count = data.get("count")
    value = data.get("value")

    if kind == "all":
        return AllQuestions(count=count)
    if kind == "subject":
        if not value:
            raise ValueError("A subject selection needs a value")
        return BySubject(count=count, subject=value)
    if kind == "paper":
        if not value:
            raise ValueError("A paper selection needs a value")
        return ByPaper(count=count, paper=value)
    raise ValueError(f"Unknown selection type: {kind!r}")


class SessionQuestion:
    """A sampled question plus the answer state local to one session."""

    def __init__(self, question: Question):
        self.question = question
        self.user_answer: Optional[str] = None
        self.revealed = False

    @property
    def id(self) -> str:
        return self.question.id

    @property
    def is_answered(self) -> bool:
        return self.user_answer is not None

    @property
    def is_correct(self) -> bool:
        return self.user_answer is not None and self.user_answer == self.question.correct_option

    @property
    def status(self) -> str:
        """Palette status: correctness is only shown once the answer is revealed."""
        if self.revealed and self.is_answered:
            return "correct" if self.is_correct else "incorrect"
        if self.is_answered:
            return "answered"
        return "not_answered"

    def __repr__(self):
        return f"SessionQuestion(id={self.id!r}, user_answer={self.user_answer!r}, revealed={self.revealed})"


def sample(bank, config: SelectionConfig, rng: Optional[random.Random] = None) -> List[SessionQuestion]:
    """Draw up to ``config.count`` questions matching the selection, in random order."""
    if not isinstance(config, (AllQuestions, BySubject, ByPaper)):
        raise TypeError(f"Unsupported selection config: {config!r}")

    filtered = [q for q in bank.questions if config.matches(q)]
    rng = rng or random.Random()
    rng.shuffle(filtered)
    selected = filtered[:config.count]

    logger.debug(f"Sampled {len(selected)} of {len(filtered)} matching questions for {config}")
    return [SessionQuestion(q) for q in selected]
