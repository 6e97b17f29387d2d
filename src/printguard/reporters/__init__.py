"""Verdict reporters for PrintGuard."""

from printguard.reporters.json_reporter import JSONReporter
from printguard.reporters.text_reporter import TextReporter

__all__ = ["JSONReporter", "TextReporter"]
