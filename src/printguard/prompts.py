"""Interactive operator prompts."""

from __future__ import annotations

import sys
from typing import Callable

Prompter = Callable[[str], str]

EXTENSIONS_QUESTION = "Enter file extensions with the . in the beginning (comma-separated)"
WARN_ONLY_QUESTION = "Warn only without blocking? (y/n)"
SEARCH_TERMS_QUESTION = "Enter patterns to search (comma-separated)"
LINE_DETAILS_QUESTION = "Show line details for each print statement? (y/n)"
EXCLUDE_QUESTION = "Paths to exclude from scanning (comma-separated, blank for none)"
CONFIRM_QUESTION = "Print statements detected. Continue anyway? (y/n)"


def ask(question: str) -> str:
    """Ask a question on stderr and read the answer from stdin.

    The answer is returned untrimmed: y/n answers must match exactly.
    """
    print(f"  {question}: ", end="", file=sys.stderr, flush=True)
    return input()


def collect_setup_answers(prompter: Prompter | None = None) -> dict[str, str]:
    """Ask the five setup questions and return the raw answers."""
    prompter = prompter or ask
    print(file=sys.stderr)
    print("PrintGuard Setup", file=sys.stderr)
    print("-" * 50, file=sys.stderr)
    return {
        "extensions": prompter(EXTENSIONS_QUESTION),
        "warn_only": prompter(WARN_ONLY_QUESTION),
        "search_terms": prompter(SEARCH_TERMS_QUESTION),
        "has_line_details": prompter(LINE_DETAILS_QUESTION),
        "files_to_exclude": prompter(EXCLUDE_QUESTION),
    }


def confirm_proceed(prompter: Prompter | None = None) -> bool:
    """Ask whether to commit despite matches.

    Only ``y`` (any case) proceeds. A closed stdin, as in an unattended run
    with no terminal, counts as a refusal.
    """
    prompter = prompter or ask
    try:
        answer = prompter(CONFIRM_QUESTION)
    except EOFError:
        print("No terminal input available; refusing to continue.", file=sys.stderr)
        return False
    return answer.lower() == "y"
