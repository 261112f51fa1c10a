"""Exam Runner: text-mode front end that drives a session."""

import logging
import re
from typing import Optional, Tuple

from .deadline_timer import format_time_remaining
from .errors import ExamError
from .session import SessionStatus

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Commands: <option number> to answer, 'check' to reveal the answer, "
    "'next'/'prev', 'goto <n>', 'palette', 'time', 'submit', 'quit'."
)

PALETTE_SYMBOLS = {
    "not_answered": ".",
    "answered": "*",
    "correct": "+",
    "incorrect": "x",
}


class ExamRunner:
    """
    Runs one exam attempt in the terminal.
    Coordinates the session state, the feedback generator and user input.
    """

    def __init__(self, session, feedback_generator, input_func=None, output_func=None):
        self.session = session
        self.feedback = feedback_generator
        self._input = input_func or input
        self._output = output_func or print

    def say(self, text: str):
        self._output(text)

    def listen(self, prompt: str = "> ") -> str:
        try:
            return self._input(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            return "quit"

    def parse_command(self, text: str) -> Tuple[Optional[str], Optional[int]]:
        """Map user input to an (action, argument) pair."""
        lower = re.sub(r"[^\w\s]", "", text.lower()).strip()
        if not lower:
            return None, None
        if lower.isdigit():
            return "answer", int(lower)
        match = re.fullmatch(r"(?:goto|go|g)\s+(\d+)", lower)
        if match:
            return "goto", int(match.group(1))
        if lower in ("check", "reveal", "c"):
            return "reveal", None
        if lower in ("next", "n"):
            return "next", None
        if lower in ("prev", "previous", "back", "p"):
            return "prev", None
        if lower in ("palette", "status"):
            return "palette", None
        if lower in ("time", "t"):
            return "time", None
        if lower in ("submit", "finish"):
            return "submit", None
        if lower in ("quit", "exit", "stop", "q"):
            return "quit", None
        if lower in ("help", "h"):
            return "help", None
        return None, None

    def render_palette(self) -> str:
        cells = []
        for i, sq in enumerate(self.session.questions, start=1):
            marker = PALETTE_SYMBOLS[sq.status]
            if i - 1 == self.session.current_index:
                marker = f"[{marker}]"
            cells.append(f"{i}{marker}")
        return " ".join(cells)

    def show_current(self):
        sq = self.session.current_question
        total = len(self.session.questions)
        self.say("")
        self.say(f"Time remaining: {format_time_remaining(self.session.time_remaining())}")
        self.say(self.feedback.format_question(sq, self.session.current_index + 1, total))

    def handle(self, action: str, arg: Optional[int]) -> bool:
        """Apply one command. Returns False when the user quits."""
        sq = self.session.current_question
        if action == "answer":
            if not 1 <= arg <= len(sq.question.options):
                self.say(f"Choose an option between 1 and {len(sq.question.options)}.")
                return True
            if sq.is_answered:
                self.say("This question is already answered; answers are final.")
                return True
            self.session.select_answer(sq.id, sq.question.options[arg - 1])
            self.show_current()
        elif action == "reveal":
            if not sq.is_answered:
                self.say("Answer the question before checking it.")
                return True
            self.session.reveal(sq.id)
            self.show_current()
        elif action == "next":
            self.session.next()
            self.show_current()
        elif action == "prev":
            self.session.previous()
            self.show_current()
        elif action == "goto":
            self.session.navigate(arg - 1)
            self.show_current()
        elif action == "palette":
            self.say(self.render_palette())
        elif action == "time":
            self.say(f"Time remaining: {format_time_remaining(self.session.time_remaining())}")
        elif action == "submit":
            self.say(
                f"You answered {self.session.answered_count()} of "
                f"{len(self.session.questions)} questions."
            )
            self.session.submit()
        elif action == "quit":
            return False
        else:
            self.say(HELP_TEXT)
        return True

    def run_exam(self, config):
        """Start a session and take commands until it is submitted or times out."""
        available = self.session.bank.max_questions(config)
        self.say(f"Available questions for this selection: {available}")
        if 0 < available < config.count:
            self.say(f"Only {available} questions match; the test will use all of them.")
        try:
            self.session.start(config)
        except ExamError as e:
            self.say(str(e))
            return None

        self.say(
            f"Your test has {len(self.session.questions)} questions and "
            f"{self.session.duration_minutes} minutes. Wrong answers cost 0.25 marks."
        )
        self.say(HELP_TEXT)
        self.show_current()

        while self.session.status == SessionStatus.RUNNING:
            action, arg = self.parse_command(self.listen())
            if self.session.status != SessionStatus.RUNNING:
                self.say("Time is up! Your test was submitted automatically.")
                break
            try:
                if not self.handle(action, arg):
                    self.say("Ending the test without submitting. Goodbye!")
                    self.session.reset()
                    return None
            except ExamError as e:
                logger.warning(f"Command {action!r} failed: {e}")
                self.say(str(e))

        report = self.session.result
        self.say("")
        self.say(self.feedback.generate_result_summary(report))
        return report

    def review(self, report):
        """Offer the answer review, AI explanations and a study plan."""
        while True:
            choice = self.listen("\n[r]eview answers, [e]xplain <n>, [s]tudy plan, [d]one: ").lower()
            if choice in ("r", "review"):
                self.say(self.feedback.format_review(report))
            elif choice in ("s", "study", "plan"):
                self.say("Generating study plan...")
                self.say(self.feedback.generate_study_plan(report))
            elif choice.startswith("e") and choice != "exit":
                match = re.fullmatch(r"e(?:xplain)?\s*(\d+)", choice)
                number = int(match.group(1)) if match else 0
                if not 1 <= number <= len(report.answered_questions):
                    self.say(f"Pick a question between 1 and {len(report.answered_questions)}.")
                    continue
                sq = report.answered_questions[number - 1]
                if sq.is_correct:
                    self.say("You answered this one correctly.")
                    continue
                self.say("Getting AI explanation...")
                self.say(self.feedback.explain_question(sq))
            else:
                return

    def run(self, config):
        report = self.run_exam(config)
        if report is not None:
            self.review(report)
        self.session.reset()
        return report
