"""Scoring Engine: Negative-marked results and per-topic analysis."""

import logging
from typing import Dict, List, Sequence

from .question_bank import DEFAULT_CATEGORY

logger = logging.getLogger(__name__)

NEGATIVE_MARK = 0.25
PASS_RATIO = 0.6


class TopicStat:
    """Correct/total counts for one category among answered questions."""

    def __init__(self, topic: str, correct: int = 0, total: int = 0):
        self.topic = topic
        self.correct = correct
        self.total = total

    @property
    def accuracy(self) -> float:
        return self.correct / self.total * 100 if self.total > 0 else 0.0

    def to_dict(self) -> dict:
        return {
            "topic": self.topic,
            "correct": self.correct,
            "total": self.total,
            "accuracy": self.accuracy,
        }


class Report:
    """Holds the result of a finished session."""

    def __init__(self, score: float, correct_count: int, incorrect_count: int,
                 total_questions: int, accuracy: float, passed: bool,
                 topic_analysis: List[TopicStat], answered_questions: tuple):
        self.score = score  # may be negative
        self.correct_count = correct_count
        self.incorrect_count = incorrect_count
        self.total_questions = total_questions
        self.accuracy = accuracy  # percentage over total_questions
        self.passed = passed
        self.topic_analysis = topic_analysis
        self.answered_questions = answered_questions

    @property
    def unanswered_count(self) -> int:
        return self.total_questions - self.correct_count - self.incorrect_count

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "correct_count": self.correct_count,
            "incorrect_count": self.incorrect_count,
            "unanswered_count": self.unanswered_count,
            "total_questions": self.total_questions,
            "accuracy": self.accuracy,
            "passed": self.passed,
            "topic_analysis": [t.to_dict() for t in self.topic_analysis],
        }


def score_session(questions: Sequence) -> Report:
    """Score a session's questions. Unanswered questions carry no penalty."""
    total_questions = len(questions)
    correct_count = 0
    incorrect_count = 0
    buckets: Dict[str, TopicStat] = {}

    for sq in questions:
        if sq.user_answer is None:
            continue
        category = sq.question.category or DEFAULT_CATEGORY
        bucket = buckets.setdefault(category, TopicStat(category))
        bucket.total += 1
        if sq.user_answer == sq.question.correct_option:
            correct_count += 1
            bucket.correct += 1
        else:
            incorrect_count += 1

    score = correct_count - NEGATIVE_MARK * incorrect_count
    accuracy = correct_count / total_questions * 100 if total_questions > 0 else 0.0
    # Compares the penalized score, not accuracy, against 60% of the total.
    passed = score >= total_questions * PASS_RATIO if total_questions > 0 else False

    logger.info(
        f"Scored session: score={score:.2f}/{total_questions}, correct={correct_count}, "
        f"incorrect={incorrect_count}, accuracy={accuracy:.1f}%, passed={passed}"
    )

    return Report(
        score=score,
        correct_count=correct_count,
        incorrect_count=incorrect_count,
        total_questions=total_questions,
        accuracy=accuracy,
        passed=passed,
        topic_analysis=list(buckets.values()),
        answered_questions=tuple(questions),
    )
