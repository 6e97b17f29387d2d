"""Plain-text match warnings for the terminal."""

from __future__ import annotations

import sys
from typing import TextIO

from printguard.models import Match


class TextReporter:
    """Render matches as one ``WARNING:`` line each."""

    def render_match(self, match: Match) -> str:
        line = f"WARNING: print statement detected at {match.location}"
        if match.text:
            line += f"\n    {match.text.strip()}"
        return line

    def render(self, matches: list[Match]) -> str:
        return "\n".join(self.render_match(m) for m in matches)

    def emit(self, matches: list[Match], stream: TextIO | None = None) -> None:
        if not matches:
            return
        print(self.render(matches), file=stream or sys.stderr)
