"""Command-line entry point for the practice exam."""

import argparse
import logging
import sys
from pathlib import Path

import yaml

from .errors import InvalidCorpus
from .exam_runner import ExamRunner
from .feedback_generator import FeedbackGenerator
from .llm_core import LLMCore
from .question_bank import QuestionBank, load_corpus_file
from .sampler import selection_from_dict
from .session import SessionState

logger = logging.getLogger(__name__)


def load_config(path: str) -> dict:
    """Read the YAML config; a missing file means defaults."""
    config_path = Path(path)
    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using defaults")
        return {}
    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Timed multiple-choice practice exam")
    parser.add_argument("--config", default="config.yaml", help="Config file path")
    parser.add_argument("--questions", default=None, help="Question bank JSON file")
    parser.add_argument("--type", choices=["all", "subject", "paper"], default=None,
                        help="Random mix, a single subject or a single paper")
    parser.add_argument("--value", default=None, help="Subject or paper name for --type")
    parser.add_argument("--count", type=int, default=None, help="Number of questions")
    parser.add_argument("--list", action="store_true", help="List subjects and papers, then exit")
    parser.add_argument("--ai", action="store_true", help="Enable AI study help via Ollama")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    config = load_config(args.config)
    quiz_cfg = config.get("quiz", {})
    llm_cfg = config.get("llm", {})
    exam_cfg = config.get("exam", {})

    bank = QuestionBank()
    questions_path = args.questions or quiz_cfg.get("questions", "data/questions.json")
    try:
        bank.load(load_corpus_file(questions_path))
    except InvalidCorpus as e:
        print(f"Could not load questions: {e}", file=sys.stderr)
        return 1

    if args.list:
        print("Subjects: " + ", ".join(bank.subjects()))
        print("Papers: " + ", ".join(bank.papers()))
        return 0

    try:
        selection = selection_from_dict({
            "type": args.type or quiz_cfg.get("type", "all"),
            "value": args.value or quiz_cfg.get("value"),
            "count": args.count if args.count is not None else quiz_cfg.get("count", 10),
        })
    except ValueError as e:
        print(f"Invalid selection: {e}", file=sys.stderr)
        return 2

    llm_core = LLMCore(
        model=llm_cfg.get("model", "llama3.2"),
        base_url=llm_cfg.get("base_url", "http://localhost:11434"),
        enabled=args.ai or llm_cfg.get("enabled", False),
        timeout=llm_cfg.get("timeout", 30.0),
    )
    feedback = FeedbackGenerator(llm_core=llm_core, exam_name=exam_cfg.get("name", "NISM Derivatives"))
    runner = ExamRunner(SessionState(bank), feedback)

    report = runner.run(selection)
    return 0 if report is not None else 1


if __name__ == "__main__":
    sys.exit(main())
