"""Session State: lifecycle of one timed exam attempt."""

import enum
import functools
import logging
import math
import random
import threading
import time
import uuid
from typing import Callable, List, Optional

from .deadline_timer import DeadlineTimer
from .errors import InvalidAnswer, InvalidTransition, NoQuestionsAvailable, UnknownQuestion
from .question_bank import QuestionBank
from .sampler import SelectionConfig, SessionQuestion, sample
from .scoring import Report, score_session

logger = logging.getLogger(__name__)

MINUTES_PER_QUESTION = 1.2


class SessionStatus(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


def duration_for(count: int) -> int:
    """Minutes allowed for a requested question count."""
    # round first so float noise just above a whole number does not add a minute
    return max(1, math.ceil(round(count * MINUTES_PER_QUESTION, 9)))


class SessionState:
    """
    Owns the quiz in progress: sampled questions, position, timing and result.

    The deadline timer may call ``submit`` from its own thread, so every
    mutation happens under one re-entrant lock.
    """

    def __init__(self, bank: QuestionBank, clock: Callable[[], float] = time.time,
                 timer_factory: Callable[..., DeadlineTimer] = DeadlineTimer,
                 rng: Optional[random.Random] = None):
        self.bank = bank
        self._clock = clock
        self._timer_factory = timer_factory
        self._rng = rng
        self._lock = threading.RLock()
        self._timer: Optional[DeadlineTimer] = None
        self._clear()

    def _clear(self):
        self.session_id: Optional[str] = None
        self.questions: List[SessionQuestion] = []
        self.current_index = 0
        self.running = False
        self.start_timestamp: Optional[float] = None
        self.duration_minutes = 0
        self.result: Optional[Report] = None

    @property
    def status(self) -> SessionStatus:
        if self.running:
            return SessionStatus.RUNNING
        if self.result is not None:
            return SessionStatus.COMPLETED
        return SessionStatus.IDLE

    @property
    def deadline(self) -> Optional[float]:
        if self.start_timestamp is None:
            return None
        return self.start_timestamp + self.duration_minutes * 60

    @property
    def current_question(self) -> Optional[SessionQuestion]:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    def start(self, config: SelectionConfig) -> List[SessionQuestion]:
        """Sample questions and start the clock."""
        with self._lock:
            if self.running:
                raise InvalidTransition("A session is already running")

            questions = sample(self.bank, config, rng=self._rng)
            if not questions:
                raise NoQuestionsAvailable(f"No questions match the selection {config}")

            if self._timer is not None:
                self._timer.cancel()

            self._clear()
            self.session_id = str(uuid.uuid4())
            self.questions = questions
            self.duration_minutes = duration_for(config.count)
            self.start_timestamp = self._clock()
            self.running = True

            self._timer = self._timer_factory(
                functools.partial(self._on_deadline, self.session_id), clock=self._clock
            )
            self._timer.arm(self.deadline)

        logger.info(
            f"Session {self.session_id} started: {len(questions)} questions "
            f"(requested {config.count}), {self.duration_minutes} minutes"
        )
        return questions

    def _on_deadline(self, session_id: str):
        with self._lock:
            if session_id != self.session_id:
                # a timer from a session that has since been reset
                return
            logger.info(f"Time is up for session {session_id}")
            self.submit()

    def _find(self, question_id: str) -> SessionQuestion:
        for sq in self.questions:
            if sq.id == question_id:
                return sq
        raise UnknownQuestion(f"Question {question_id!r} is not part of this session")

    def select_answer(self, question_id: str, option: str):
        """Record an answer. The first answer to a question is final."""
        with self._lock:
            if not self.running:
                raise InvalidTransition("Answers can only be chosen while the session is running")
            sq = self._find(question_id)
            if sq.user_answer is not None:
                logger.debug(f"Question {question_id} already answered; keeping {sq.user_answer!r}")
                return
            if option not in sq.question.options:
                raise InvalidAnswer(f"{option!r} is not an option of question {question_id!r}")
            sq.user_answer = option

    def reveal(self, question_id: str):
        with self._lock:
            self._find(question_id).revealed = True

    def navigate(self, index: int):
        """Move to ``index``; out-of-range values are ignored."""
        with self._lock:
            if 0 <= index < len(self.questions):
                self.current_index = index

    def next(self):
        self.navigate(self.current_index + 1)

    def previous(self):
        self.navigate(self.current_index - 1)

    def submit(self) -> Optional[Report]:
        """Finalize the session once; later calls return the existing result."""
        with self._lock:
            if not self.running:
                logger.debug("submit() ignored: no running session")
                return self.result
            if self._timer is not None:
                self._timer.cancel()
            self.result = score_session(self.questions)
            self.running = False
            result = self.result

        logger.info(f"Session {self.session_id} submitted: {result.to_dict()}")
        return result

    def reset(self):
        """Discard the session; the question bank is kept."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._clear()
        logger.debug("Session reset")

    def time_remaining(self) -> float:
        """Seconds left before auto-submit, clamped at zero."""
        with self._lock:
            if not self.running or self.deadline is None:
                return 0.0
            return max(0.0, self.deadline - self._clock())

    def answered_count(self) -> int:
        return sum(1 for sq in self.questions if sq.is_answered)
