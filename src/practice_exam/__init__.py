"""Timed multiple-choice practice exams with negative marking."""

__version__ = "0.1.0"
