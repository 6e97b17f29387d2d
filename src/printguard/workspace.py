"""Git working tree inspection for PrintGuard."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Iterable

from printguard.config import GuardSettings
from printguard.errors import ChangeListingError, RootResolutionError
from printguard.models import ChangeKind, StagedChange

# Statuses whose record carries a source and a destination path
_PAIRED_KINDS = (ChangeKind.RENAMED, ChangeKind.COPIED)


class WorkspaceInspector:
    """Answers questions about the git working tree around ``settings.workdir``."""

    def __init__(self, settings: GuardSettings) -> None:
        self.settings = settings

    def _git(self, args: list[str], cwd: str | Path | None = None) -> subprocess.CompletedProcess:
        return subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=True,
            cwd=str(cwd or self.settings.workdir),
        )

    def is_version_controlled(self) -> bool:
        """Return True if the working directory is inside a git working tree."""
        try:
            result = self._git(["rev-parse", "--is-inside-work-tree"])
        except (subprocess.CalledProcessError, OSError):
            return False
        return result.stdout.strip() == "true"

    def resolve_root(self) -> str:
        """Return the top-level directory of the working tree.

        Raises:
            RootResolutionError: If git cannot report the top level.
        """
        try:
            result = self._git(["rev-parse", "--show-toplevel"])
        except subprocess.CalledProcessError as e:
            raise RootResolutionError(f"Failed to get repo root: {e.stderr.strip()}") from e
        except OSError as e:
            raise RootResolutionError(f"Failed to get repo root: {e}") from e
        return os.path.normpath(result.stdout.strip())

    def resolve_hooks_dir(self, root: str | None = None) -> str:
        """Return the hooks directory, honoring ``core.hooksPath`` and worktrees."""
        root = root or self.resolve_root()
        try:
            result = self._git(["rev-parse", "--git-path", "hooks"], cwd=root)
        except (subprocess.CalledProcessError, OSError):
            return os.path.join(root, ".git", "hooks")
        hooks = result.stdout.strip()
        return os.path.normpath(os.path.join(root, hooks))

    def list_staged_changes(self, root: str | None = None) -> list[StagedChange]:
        """List staged entries as absolute paths, without renames.

        Raises:
            RootResolutionError: If ``root`` is omitted and cannot be resolved.
            ChangeListingError: If ``git diff --cached`` fails.
        """
        root = root or self.resolve_root()
        try:
            result = self._git(["diff", "--cached", "--name-status", "-z"], cwd=root)
        except subprocess.CalledProcessError as e:
            raise ChangeListingError(
                f"git diff --cached failed with code {e.returncode}: {e.stderr.strip()}"
            ) from e
        except OSError as e:
            raise ChangeListingError(f"Failed to spawn git: {e}") from e
        return parse_name_status(result.stdout, root)


def parse_name_status(output: str, root: str) -> list[StagedChange]:
    """Parse ``git diff --name-status -z`` output.

    Each record is ``STATUS\\0PATH\\0``, or ``STATUS\\0SRC\\0DST\\0`` for
    renames and copies. Renamed records are dropped.
    """
    normalized_root = os.path.normpath(root)
    tokens = output.split("\0")
    changes: list[StagedChange] = []
    i = 0
    while i < len(tokens):
        status = tokens[i]
        i += 1
        if not status:
            continue
        kind = ChangeKind.from_status(status)
        if kind in _PAIRED_KINDS:
            if i + 1 >= len(tokens):
                raise ChangeListingError(f"Truncated {status} record in staged change listing")
            source, dest = tokens[i], tokens[i + 1]
            i += 2
            if kind is ChangeKind.RENAMED:
                continue
            changes.append(
                StagedChange(
                    path=_join(normalized_root, dest),
                    kind=kind,
                    old_path=_join(normalized_root, source),
                )
            )
            continue
        if i >= len(tokens):
            raise ChangeListingError(f"Truncated {status} record in staged change listing")
        changes.append(StagedChange(path=_join(normalized_root, tokens[i]), kind=kind))
        i += 1
    return changes


def filter_by_extension(
    changes: Iterable[StagedChange | str], allowed_extensions: Iterable[str]
) -> list[str]:
    """Keep paths ending in one of ``allowed_extensions`` (case-sensitive)."""
    suffixes = tuple(allowed_extensions)
    if not suffixes:
        return []
    paths = [c.path if isinstance(c, StagedChange) else c for c in changes]
    return [p for p in paths if p.endswith(suffixes)]


def _join(root: str, entry: str) -> str:
    return os.path.normpath(os.path.join(root, entry))
