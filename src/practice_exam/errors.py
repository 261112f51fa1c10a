"""Exceptions raised by the exam engine."""


class ExamError(Exception):
    """Base class for all exam engine errors."""


class InvalidCorpus(ExamError):
    """The imported question corpus is malformed; the bank is left unchanged."""


class NoQuestionsAvailable(ExamError):
    """The selection matched no questions, so no session was started."""


class UnknownQuestion(ExamError):
    """An operation referenced a question id not present in the session."""


class InvalidTransition(ExamError):
    """An operation is not allowed in the current session state."""


class InvalidAnswer(ExamError):
    """The chosen option is not one of the question's options."""
