"""Machine-readable verdict output for ``printguard check --format json``."""

from __future__ import annotations

import json
from pathlib import Path

from printguard.models import Verdict


class JSONReporter:
    """Serializes a check verdict for CI logs and other tools."""

    def render(self, verdict: Verdict) -> str:
        """Return the verdict as indented JSON.

        The object carries ``verdict`` (PASS, WARN or BLOCK), the process
        ``exit_code``, a short ``reason`` and the ``matches`` list. Matches
        have ``line`` and ``text`` only when line details are enabled.
        """
        return json.dumps(verdict.to_dict(), indent=2, ensure_ascii=False)

    def write(self, verdict: Verdict, output_path: str | Path) -> Path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(verdict) + "\n", encoding="utf-8")
        return path
