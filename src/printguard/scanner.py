"""Pattern scanning over staged content with ``git grep --cached``."""

from __future__ import annotations

import os
import subprocess
import sys
from typing import Sequence

from printguard.config import GuardSettings
from printguard.errors import ScanExecutionError
from printguard.models import Match

# git grep exits 1 when nothing matched
_NO_MATCH_CODE = 1


class PatternScanner:
    """Searches the staged version of files for any configured pattern.

    A scan that cannot run is treated as "no matches" and reported with a
    warning line, so a broken git grep lets commits through. Set
    ``GuardSettings.strict_scan`` to raise ``ScanExecutionError`` instead.
    """

    def __init__(self, settings: GuardSettings) -> None:
        self.settings = settings

    def scan(
        self,
        files: Sequence[str],
        terms: Sequence[str],
        line_detail: bool,
        exclusions: Sequence[str] = (),
        root: str | None = None,
    ) -> list[Match]:
        """Return the matches of ``terms`` in the staged content of ``files``.

        Args:
            files: Absolute paths inside ``root``.
            terms: Fixed strings; a line matches if it contains any of them.
            line_detail: Report one match per line instead of one per file.
            exclusions: Path fragments; files whose root-relative path
                contains any of them are skipped.
            root: Working tree root. Defaults to the settings workdir.

        Returns:
            Matches in git grep's order (file, then line).
        """
        if not files:
            return []

        root = os.path.normpath(root or str(self.settings.workdir))
        rel_paths = [
            rel for rel in (os.path.relpath(f, root) for f in files)
            if not is_excluded(rel, exclusions)
        ]
        patterns = [t for t in terms if t]
        if not rel_paths or not patterns:
            return []

        cmd = build_grep_command(rel_paths, patterns, line_detail)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                cwd=root,
            )
        except OSError as e:
            return self._scan_failed(f"could not run git grep: {e}")

        if result.returncode == 0:
            return parse_grep_output(result.stdout, root, line_detail)
        if result.returncode == _NO_MATCH_CODE:
            return []
        return self._scan_failed(
            f"git grep exited with code {result.returncode}: {result.stderr.strip()}"
        )

    def _scan_failed(self, reason: str) -> list[Match]:
        if self.settings.strict_scan:
            raise ScanExecutionError(f"Pattern scan failed: {reason}")
        print(
            f"warning: pattern scan failed ({reason}); treating as no matches",
            file=sys.stderr,
        )
        return []


def is_excluded(rel_path: str, exclusions: Sequence[str]) -> bool:
    normalized = rel_path.replace(os.sep, "/")
    return any(fragment and fragment in normalized for fragment in exclusions)


def build_grep_command(rel_paths: Sequence[str], terms: Sequence[str], line_detail: bool) -> list[str]:
    # Paths are matched literally, never as globs or magic pathspecs.
    cmd = ["git", "--literal-pathspecs", "grep", "--cached", "-I", "-z", "--full-name", "-F"]
    cmd.append("-n" if line_detail else "-l")
    for term in terms:
        cmd.extend(["-e", term])
    cmd.append("--")
    cmd.extend(rel_paths)
    return cmd


def parse_grep_output(output: str, root: str, line_detail: bool) -> list[Match]:
    """Parse NUL-delimited git grep output into matches.

    ``-l -z`` prints ``PATH\\0`` per file; ``-n -z`` prints
    ``PATH\\0LINE\\0TEXT\\n`` per matching line.
    """
    matches: list[Match] = []
    if not line_detail:
        seen: set[str] = set()
        for entry in output.split("\0"):
            entry = entry.strip("\n")
            if not entry or entry in seen:
                continue
            seen.add(entry)
            matches.append(Match(file=_absolute(root, entry)))
        return matches

    for record in output.split("\n"):
        if not record:
            continue
        parts = record.split("\0", 2)
        if len(parts) < 2 or not parts[1].isdigit():
            continue
        text = parts[2] if len(parts) == 3 else ""
        matches.append(Match(file=_absolute(root, parts[0]), line=int(parts[1]), text=text))
    return matches


def _absolute(root: str, entry: str) -> str:
    return os.path.normpath(os.path.join(root, entry))
