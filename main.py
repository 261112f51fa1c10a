#!/usr/bin/env python3
"""Demo entry point for the practice exam."""

import sys
from pathlib import Path


def main():
    sys.path.insert(0, str(Path(__file__).parent / "src"))

    from practice_exam.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
