"""Feedback Generator: result summaries, study plans and AI explanations."""

import logging
import random

from .scoring import PASS_RATIO

logger = logging.getLogger(__name__)

PASS_TEMPLATES = [
    "Congratulations, you passed! {reinforcement}",
    "PASS. Well done! {reinforcement}",
    "You cleared the pass mark. {reinforcement}",
]

FAIL_TEMPLATES = [
    "FAIL. Not quite there yet. {advice}",
    "You fell short of the pass mark this time. {advice}",
]

REINFORCEMENTS = [
    "Keep it up!",
    "Your preparation is paying off.",
    "Great consistency across topics.",
]

ADVICE = [
    "Review the explanations below and try again.",
    "Focus on your weakest topics and take another test.",
    "Every attempt builds exam stamina. Keep practicing!",
]


class FeedbackGenerator:
    """Formats questions and results, and asks the LLM for study help."""

    def __init__(self, llm_core=None, exam_name: str = "NISM Derivatives"):
        self._llm = llm_core
        self.exam_name = exam_name

    def format_question(self, session_question, question_num: int, total: int) -> str:
        """Render a question with numbered options and its current answer state."""
        q = session_question.question
        lines = [f"Question {question_num} of {total}  [{q.category}]", q.text, ""]
        for i, option in enumerate(q.options, start=1):
            marker = " "
            if session_question.revealed and option == q.correct_option:
                marker = "+"
            elif option == session_question.user_answer:
                marker = "x" if session_question.revealed else "*"
            lines.append(f" {marker} {i}. {option}")
        if session_question.revealed:
            lines.append("")
            lines.append(f"Correct answer: {q.correct_option}")
            if q.explanation:
                lines.append(f"Explanation: {q.explanation}")
        return "\n".join(lines)

    def generate_result_summary(self, report) -> str:
        """Headline result block shown after submission."""
        if report.passed:
            verdict = random.choice(PASS_TEMPLATES).format(reinforcement=random.choice(REINFORCEMENTS))
        else:
            verdict = random.choice(FAIL_TEMPLATES).format(advice=random.choice(ADVICE))

        lines = [
            verdict,
            f"Score (with negative marking): {report.score:.2f} / {report.total_questions}",
            f"Accuracy: {report.accuracy:.2f}% ({report.correct_count}/{report.total_questions})",
            f"Incorrect: {report.incorrect_count}  Unanswered: {report.unanswered_count}",
            f"Pass mark: {PASS_RATIO:.0%}",
        ]
        if report.topic_analysis:
            lines.append("")
            lines.append("Topic-wise performance:")
            for t in report.topic_analysis:
                lines.append(f"  {t.topic}: {t.correct}/{t.total} ({t.accuracy:.0f}%)")
        return "\n".join(lines)

    def format_review(self, report) -> str:
        """Per-question answer review."""
        blocks = []
        for i, sq in enumerate(report.answered_questions, start=1):
            q = sq.question
            block = [
                f"{i}. {q.text}",
                f"   Your answer: {sq.user_answer or 'Not Answered'}",
                f"   Correct answer: {q.correct_option}",
            ]
            if q.explanation:
                block.append(f"   Explanation: {q.explanation}")
            blocks.append("\n".join(block))
        return "\n\n".join(blocks)

    def topic_summary(self, report) -> str:
        return ", ".join(f"{t.topic}: {t.accuracy:.0f}% accuracy" for t in report.topic_analysis)

    def study_plan_prompt(self, report) -> str:
        return (
            f"I just took a practice test for the {self.exam_name} exam. "
            f"My performance was: {self.topic_summary(report)}. "
            f"Based on these results, please identify my weakest topics and generate a concise, "
            f"actionable study plan to help me improve. The plan should be encouraging and "
            f"motivational. Format the output using markdown."
        )

    def explanation_prompt(self, session_question) -> str:
        q = session_question.question
        if session_question.user_answer is None:
            clarify = "I did not answer it, so also point out how to recognise the right option. "
        else:
            clarify = f"Also, clarify why \"{session_question.user_answer}\" is incorrect. "
        return (
            f"For a student preparing for the {self.exam_name} exam, please explain why the "
            f"correct answer to the following question is \"{q.correct_option}\". "
            f"{clarify}"
            f"Keep the tone simple and clear.\n\n"
            f"Question: \"{q.text}\"\n\n"
            f"Base Explanation (for context): \"{q.explanation or ''}\""
        )

    def generate_study_plan(self, report) -> str:
        """Ask the LLM for a study plan based on topic accuracy."""
        if not report.topic_analysis:
            return "No questions were answered, so there is nothing to build a study plan from."
        if self._llm is None:
            return "AI assistance is not configured."
        logger.info("Requesting AI study plan")
        return self._llm.generate_text(self.study_plan_prompt(report))

    def explain_question(self, session_question) -> str:
        """Ask the LLM why the correct answer is right and the user's answer wrong."""
        if self._llm is None:
            return session_question.question.explanation or "AI assistance is not configured."
        logger.info(f"Requesting AI explanation for question {session_question.id}")
        return self._llm.generate_text(self.explanation_prompt(session_question))
